"""CLI for the Business Model Catalog."""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from .app_logging import setup_logging
from .loader import (
    CatalogLoadError,
    find_model,
    load_catalog,
    load_default_catalog,
    validate_catalog_file,
)
from .schema import BusinessCatalog, BusinessModelDefinition, Difficulty


console = Console()


def _open_catalog(catalog: Optional[Path]) -> BusinessCatalog:
    if catalog:
        return load_catalog(catalog)
    return load_default_catalog()


@click.group()
@click.version_option(version="1.0.0", prog_name="business-catalog")
@click.option('--verbose', '-v', is_flag=True, help='Show debug logging')
def main(verbose: bool):
    """Business Model Catalog.

    Inspect, validate and export the catalog of business models that
    questionnaire answers are scored against.
    """
    setup_logging(verbose=verbose)


@main.command(name='list')
@click.option(
    '--catalog',
    type=click.Path(exists=True, path_type=Path),
    help='Path to a catalog JSON/YAML file (default: bundled catalog)'
)
@click.option(
    '--difficulty',
    type=click.Choice([d.value for d in Difficulty], case_sensitive=False),
    help='Filter by difficulty'
)
def list_models(catalog: Optional[Path], difficulty: Optional[str]):
    """List the business models in a catalog.

    Example:
        business-catalog list --difficulty easy
    """
    try:
        cat = _open_catalog(catalog)
    except CatalogLoadError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    models = cat.models
    if difficulty:
        wanted = Difficulty.from_string(difficulty)
        models = [m for m in models if m.difficulty == wanted]

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="cyan", max_width=40)
    table.add_column("Name", max_width=40)
    table.add_column("Difficulty")
    table.add_column("Time to Profit")
    table.add_column("Startup Cost")

    for model in models:
        table.add_row(
            model.id,
            model.name or "-",
            model.difficulty.value,
            model.time_to_profit or "-",
            model.startup_cost or "-",
        )

    console.print(table)
    console.print(f"\n{len(models)} of {cat.total_models} business models (catalog v{cat.version})")


@main.command()
@click.argument('model_id')
@click.option(
    '--catalog',
    type=click.Path(exists=True, path_type=Path),
    help='Path to a catalog JSON/YAML file (default: bundled catalog)'
)
def show(model_id: str, catalog: Optional[Path]):
    """Show details for one business model.

    Example:
        business-catalog show freelancing
    """
    try:
        cat = _open_catalog(catalog)
    except CatalogLoadError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    model = find_model(cat, model_id)
    if model is None:
        console.print(f"[red]Business model not found:[/red] {model_id}")
        sys.exit(1)

    _print_model_detail(model)


def _print_model_detail(model: BusinessModelDefinition):
    """Print detailed information about a business model."""
    console.print(f"\n[bold blue]{model.name}[/bold blue]")
    console.print(f"ID: {model.id}")
    console.print(f"Difficulty: {model.difficulty.value}")

    console.print("\n[bold]Description[/bold]")
    console.print(model.description or "(none)")

    console.print("\n[bold]At a Glance[/bold]")
    console.print(f"  Time to profit: {model.time_to_profit or '-'}")
    console.print(f"  Startup cost: {model.startup_cost or '-'}")
    console.print(f"  Potential income: {model.potential_income or '-'}")
    if model.market_size:
        console.print(f"  Market size: {model.market_size}")

    thresholds = model.thresholds
    console.print("\n[bold]Scoring Thresholds[/bold]")
    console.print(f"  Minimum budget: ${thresholds.min_budget:,.0f}")
    console.print(f"  Minimum hours/week: {thresholds.min_weekly_hours:g}")
    console.print(f"  Months to first income: {thresholds.months_to_first_income:g}")
    if thresholds.max_monthly_income is not None:
        console.print(f"  Realistic monthly ceiling: ${thresholds.max_monthly_income:,.0f}")

    if model.trait_requirements:
        table = Table(title="Trait Requirements", show_header=True, header_style="bold")
        table.add_column("Trait", style="cyan")
        table.add_column("Weight", justify="right")
        table.add_column("Minimum", justify="right")
        table.add_column("Direction")
        for req in model.trait_requirements:
            table.add_row(
                req.trait,
                f"{req.weight:g}",
                f"{req.minimum:.0%}" if req.minimum is not None else "-",
                req.direction.value,
            )
        console.print()
        console.print(table)

    if model.pros:
        console.print("\n[bold]Pros[/bold]")
        for pro in model.pros:
            console.print(f"  [green]+[/green] {pro}")

    if model.cons:
        console.print("\n[bold]Cons[/bold]")
        for con in model.cons:
            console.print(f"  [yellow]-[/yellow] {con}")

    phases = [
        ("Phase 1", model.action_plan.phase1),
        ("Phase 2", model.action_plan.phase2),
        ("Phase 3", model.action_plan.phase3),
    ]
    if any(steps for _, steps in phases):
        console.print("\n[bold]Action Plan[/bold]")
        for label, steps in phases:
            if steps:
                console.print(f"  {label}:")
                for step in steps:
                    console.print(f"    • {step}")

    if model.load_warnings:
        console.print("\n[yellow]Warnings[/yellow]")
        for warning in model.load_warnings:
            console.print(f"  • {warning}")


@main.command()
@click.argument('path', type=click.Path(path_type=Path))
def validate(path: Path):
    """Validate a catalog file.

    Example:
        business-catalog validate my-catalog.yaml
    """
    is_valid, issues = validate_catalog_file(path)
    if is_valid:
        console.print(f"[green]✓ Catalog valid: {path}[/green]")
    else:
        console.print(f"[red]✗ Catalog invalid: {path}[/red]")
    for issue in issues:
        console.print(f"  - {issue}")

    sys.exit(0 if is_valid else 1)


@main.command()
@click.option(
    '--out',
    type=click.Path(path_type=Path),
    default='business-catalog.json',
    help='Output path for the catalog JSON file'
)
@click.option(
    '--catalog',
    type=click.Path(exists=True, path_type=Path),
    help='Path to a catalog JSON/YAML file (default: bundled catalog)'
)
def export(out: Path, catalog: Optional[Path]):
    """Export a catalog as JSON.

    Example:
        business-catalog export --out business-catalog.json
    """
    try:
        cat = _open_catalog(catalog)
        out.parent.mkdir(parents=True, exist_ok=True)
        with open(out, 'w', encoding='utf-8') as f:
            f.write(cat.model_dump_json(indent=2))
    except (CatalogLoadError, OSError) as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    console.print(f"[green]✓[/green] Exported {cat.total_models} business models to {out}")


if __name__ == '__main__':
    main()
