"""CLI for the Fit Scoring Engine.

Provides command-line interface for scoring questionnaire answers against
the business model catalog.
"""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from business_catalog.app_logging import setup_logging
from business_catalog.loader import find_model, validate_catalog_file

from .config import ScorerConfig, find_config_file, load_config, save_default_config
from .engine import ScoringEngine, validate_response_file
from .schema import RankedPath, ScoringResult
from .traits import TRAIT_SLIDERS, derive_trait_scores

console = Console()

QUALITY_COLORS = {
    "Excellent Match": "green",
    "Great Match": "cyan",
    "Good Match": "yellow",
    "Fair Match": "white",
}


def _load_scorer_config(config_path: Optional[str]) -> Optional[ScorerConfig]:
    """Load an explicit config file, or the first one found on the search path."""
    if config_path:
        return load_config(Path(config_path))
    found = find_config_file()
    if found:
        return load_config(found)
    return None


def _build_engine(catalog: Optional[str], config_path: Optional[str] = None) -> ScoringEngine:
    engine = ScoringEngine(config=_load_scorer_config(config_path))
    if catalog:
        engine.load_catalog(catalog)
    return engine


@click.group()
@click.version_option(version="1.0.0", prog_name="fit-scorer")
def main():
    """Business Model Fit Scoring Engine.

    Turns questionnaire answers into trait scores and ranks every business
    model in the catalog by how well it fits.
    """
    pass


@main.command("score")
@click.option(
    "--response", "-r",
    required=True,
    type=click.Path(exists=True),
    help="Path to questionnaire response JSON/YAML file"
)
@click.option(
    "--catalog", "-c",
    type=click.Path(exists=True),
    help="Path to a business model catalog (default: bundled catalog)"
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True),
    help="Path to scorer configuration YAML file"
)
@click.option(
    "--top", "-n",
    "top_n",
    type=int,
    default=None,
    help="Number of top matches to highlight"
)
@click.option(
    "--out", "-o",
    type=click.Path(),
    help="Output file for JSON results"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Show detailed output and debug logging"
)
@click.option(
    "--json-output", "-j",
    is_flag=True,
    help="Output raw JSON instead of formatted text"
)
def score_cmd(
    response: str,
    catalog: Optional[str],
    config_path: Optional[str],
    top_n: Optional[int],
    out: Optional[str],
    verbose: bool,
    json_output: bool,
):
    """Score questionnaire answers against the business model catalog.

    Examples:
        fit-scorer score -r response.json
        fit-scorer score -r response.json -n 5 -v
        fit-scorer score -r response.json -c my-catalog.yaml -j
    """
    setup_logging(verbose=verbose)

    try:
        engine = _build_engine(catalog, config_path)

        if json_output:
            result = engine.score(response, top_n=top_n)
            output_json(result, out)
            return

        engine_catalog = engine.get_catalog()
        console.print("\n[bold blue]Business Model Fit Scoring[/bold blue]")
        console.print(f"Catalog: {catalog or 'bundled'} ({engine_catalog.total_models} business models)")
        console.print(f"Response: {response}")
        console.print()

        with console.status("Scoring answers..."):
            result = engine.score(response, top_n=top_n)

        display_result(result, verbose)
        if out:
            output_json(result, out)
            console.print(f"\n[green]Results saved to {out}[/green]")

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@main.command("traits")
@click.option(
    "--response", "-r",
    required=True,
    type=click.Path(exists=True),
    help="Path to questionnaire response JSON/YAML file"
)
def traits_cmd(response: str):
    """Show the trait profile derived from questionnaire answers.

    Example:
        fit-scorer traits -r response.json
    """
    try:
        engine = ScoringEngine()
        quiz, _ = engine.prepare_response(response)
        scores = derive_trait_scores(quiz).as_dict()

        table = Table(title="Trait Profile")
        table.add_column("Trait", style="bold")
        table.add_column("Low")
        table.add_column("Score", justify="right")
        table.add_column("High")

        for slider in TRAIT_SLIDERS:
            value = scores[slider.trait.value]
            table.add_row(slider.label, slider.left_label, f"{value:.0%}", slider.right_label)

        console.print(table)

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@main.command("explain")
@click.option(
    "--response", "-r",
    required=True,
    type=click.Path(exists=True),
    help="Path to questionnaire response JSON/YAML file"
)
@click.option(
    "--id", "model_id",
    required=True,
    help="Business model ID to explain"
)
@click.option(
    "--catalog", "-c",
    type=click.Path(exists=True),
    help="Path to a business model catalog (default: bundled catalog)"
)
def explain_cmd(response: str, model_id: str, catalog: Optional[str]):
    """Show the scoring breakdown for one business model.

    Example:
        fit-scorer explain -r response.json --id freelancing
    """
    try:
        engine = _build_engine(catalog)
        model = find_model(engine.get_catalog(), model_id)
        if model is None:
            console.print(f"[red]Business model not found: {model_id}[/red]")
            sys.exit(1)

        quiz, _ = engine.prepare_response(response)
        paths = engine.rank(quiz)
        path = next(p for p in paths if p.id == model.id)
        display_path_detail(path)

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@main.command("validate")
@click.option(
    "--response", "-r",
    type=click.Path(),
    help="Path to questionnaire response JSON/YAML file"
)
@click.option(
    "--catalog", "-c",
    type=click.Path(),
    help="Path to business model catalog JSON/YAML file"
)
def validate_cmd(response: Optional[str], catalog: Optional[str]):
    """Validate response and/or catalog files.

    Examples:
        fit-scorer validate -r response.json
        fit-scorer validate -c catalog.yaml
        fit-scorer validate -r response.json -c catalog.yaml
    """
    if not response and not catalog:
        console.print("[yellow]Please specify --response and/or --catalog to validate[/yellow]")
        return

    all_valid = True

    if response:
        is_valid, issues = validate_response_file(response)
        if is_valid:
            console.print(f"[green]✓ Response valid: {response}[/green]")
        else:
            console.print(f"[red]✗ Response invalid: {response}[/red]")
            all_valid = False
        for issue in issues:
            console.print(f"  - {issue}")

    if catalog:
        is_valid, issues = validate_catalog_file(catalog)
        if is_valid:
            console.print(f"[green]✓ Catalog valid: {catalog}[/green]")
        else:
            console.print(f"[red]✗ Catalog invalid: {catalog}[/red]")
            all_valid = False
        for issue in issues:
            console.print(f"  - {issue}")

    sys.exit(0 if all_valid else 1)


def display_result(result: ScoringResult, verbose: bool):
    """Display scoring result in formatted text."""
    summary = result.summary
    color = QUALITY_COLORS.get(summary.match_quality or "", "white")

    primary_line = "None"
    if summary.primary_recommendation:
        primary_line = (
            f"[bold cyan]{summary.primary_recommendation}[/bold cyan] "
            f"[bold]{summary.primary_fit_score}%[/bold] [{color}]{summary.match_quality}[/{color}]"
        )

    console.print(Panel(
        f"Primary Recommendation: {primary_line}\n"
        f"Questions answered: {summary.answered_count} | "
        f"Business models ranked: {len(result.ranked_paths)}",
        title="Fit Summary",
    ))

    # Key strengths
    if summary.key_strengths:
        console.print("\n[bold]Key Strengths:[/bold]")
        for strength in summary.key_strengths:
            console.print(f"  [green]•[/green] {strength}")

    # Key gaps
    if summary.key_gaps:
        console.print("\n[bold]Key Gaps:[/bold]")
        for gap in summary.key_gaps:
            console.print(f"  [yellow]•[/yellow] {gap}")

    # Top matches
    if result.top_matches:
        console.print("\n[bold]Top Matches:[/bold]\n")
        for path in result.top_matches:
            color = QUALITY_COLORS.get(path.match_quality, "white")
            console.print(
                f"  [bold cyan]{path.rank}. {path.name}[/bold cyan] "
                f"[bold]{path.fit_score}%[/bold] [{color}]{path.match_quality}[/{color}]"
            )
            for insight in path.insights:
                console.print(f"     {insight}")

            if verbose:
                console.print(f"     ID: {path.id}")
                if path.fit_summary:
                    console.print(f"     [green]Fits:[/green] {'; '.join(path.fit_summary[:2])}")
                if path.struggle_summary:
                    console.print(f"     [yellow]Struggles:[/yellow] {'; '.join(path.struggle_summary[:2])}")
            console.print()

    # Full ranking
    if verbose and result.ranked_paths:
        table = Table(title="Full Ranking")
        table.add_column("#", justify="right")
        table.add_column("Business Model")
        table.add_column("Fit", justify="right")
        table.add_column("Match")
        for path in result.ranked_paths:
            table.add_row(str(path.rank), path.name, f"{path.fit_score}%", path.match_quality)
        console.print(table)

    # Personality insights
    if result.personality_insights:
        console.print("\n[bold]Personality Insights:[/bold]")
        for insight in result.personality_insights:
            marker = "[green]+[/green]" if insight.strength else "[yellow]-[/yellow]"
            console.print(f"  {marker} [bold]{insight.trait}[/bold]: {insight.description}")

    # Resource readiness
    if result.resource_readiness:
        console.print("\n[bold]Resource Readiness:[/bold]")
        for factor in result.resource_readiness:
            console.print(f"  • {factor.factor}: [bold]{factor.level}[/bold] ({factor.detail})")

    # Models to avoid
    if result.models_to_avoid:
        console.print("\n[bold]Business Models to Avoid:[/bold]")
        for note in result.models_to_avoid:
            console.print(f"  [red]{note.name}[/red] {note.fit_score}%")
            for reason in note.reasons:
                console.print(f"     [dim]• {reason}[/dim]")

    # Warnings
    if result.processing_warnings:
        console.print("\n[dim]Warnings:[/dim]")
        for warning in result.processing_warnings:
            console.print(f"  [dim]• {warning}[/dim]")


def display_path_detail(path: RankedPath):
    """Display the scoring breakdown for one ranked path."""
    color = QUALITY_COLORS.get(path.match_quality, "white")
    console.print(Panel(
        f"[bold cyan]{path.name}[/bold cyan] ({path.id})\n\n"
        f"Fit Score: [bold]{path.fit_score}%[/bold] [{color}]{path.match_quality}[/{color}]\n"
        f"Rank: {path.rank}",
        title="Fit Breakdown",
    ))

    if path.fallback:
        console.print("[yellow]This business model could not be scored; a neutral score was assigned.[/yellow]")

    if path.dimensions:
        table = Table(title="Scoring Dimensions")
        table.add_column("Dimension")
        table.add_column("Weight", justify="right")
        table.add_column("Score", justify="right")
        table.add_column("Reasoning")
        for dim in path.dimensions:
            table.add_row(dim.dimension, f"{dim.weight:.2f}", f"{dim.raw_score:.0f}", dim.reasoning)
        console.print(table)

    if path.matched:
        console.print("\n[bold]Matches:[/bold]")
        for m in path.matched:
            console.print(f"  [green]✓[/green] {m.dimension}: {m.value} - {m.reasoning}")

    if path.mismatched:
        console.print("\n[bold]Mismatches:[/bold]")
        for m in path.mismatched:
            console.print(f"  [yellow]✗[/yellow] {m.dimension}: expected {m.expected}, got {m.actual} - {m.impact}")


def output_json(result: ScoringResult, out_path: Optional[str]):
    """Output result as JSON."""
    json_str = result.model_dump_json(indent=2)

    if out_path:
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(json_str)
    else:
        print(json_str)


@main.command("init-config")
@click.option(
    "--out", "-o",
    type=click.Path(),
    default="fit-scorer.yaml",
    help="Output path for the configuration file"
)
@click.option(
    "--force", "-f",
    is_flag=True,
    help="Overwrite existing config file"
)
def init_config_cmd(out: str, force: bool):
    """Generate a default scorer configuration file.

    Creates a YAML configuration file with all available settings
    for customizing the fit scoring.

    Example:
        fit-scorer init-config --out my-config.yaml
    """
    out_path = Path(out)
    if out_path.exists() and not force:
        console.print(f"[red]Error:[/red] Config file already exists: {out}")
        console.print("Use --force to overwrite")
        sys.exit(1)

    try:
        save_default_config(out_path)
        console.print(f"[green]✓[/green] Config file created: {out}")
        console.print("\nThis file configures:")
        console.print("  • scoring_weights - How much each factor contributes to the fit score")
        console.print("  • match_quality - Score thresholds for the match labels")
        console.print("  • readiness_thresholds - Break points for resource readiness")
        console.print("  • report - How many matches and models to avoid are listed")
        console.print("\nThe scorer will look for config in this order:")
        console.print("  1. FIT_SCORER_CONFIG environment variable")
        console.print("  2. ./fit-scorer.yaml (current directory)")
        console.print("  3. ~/.config/fit-scorer/config.yaml")
    except Exception as e:
        console.print(f"[red]Error creating config:[/red] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
