"""Catalog loading and validation.

Reads business model catalogs from JSON or YAML files and turns them into
an immutable BusinessCatalog. Loading is the only place where raw catalog
data is interpreted:

- Legacy and camelCase keys are resolved by the schema validators
- An entry that fails validation is kept as a minimal placeholder so it
  still shows up in rankings with a neutral score
- Structural problems with the file itself raise CatalogLoadError
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from .schema import BusinessCatalog, BusinessModelDefinition

logger = logging.getLogger(__name__)

# ── Limits ──────────────────────────────────────────────────────────────────
MAX_CATALOG_BYTES = 5 * 1024 * 1024  # 5 MB
MAX_MODEL_COUNT = 500  # no curated catalog should come close to this

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "business_models.yaml"


class CatalogLoadError(Exception):
    """Raised when a catalog file cannot be loaded."""


def _read_catalog_file(path: Path) -> Any:
    """Read and parse a catalog file based on its suffix."""
    if not path.exists():
        raise CatalogLoadError(f"Catalog file not found: {path}")

    if path.stat().st_size > MAX_CATALOG_BYTES:
        raise CatalogLoadError(
            f"Catalog exceeds the maximum allowed size of "
            f"{MAX_CATALOG_BYTES // (1024 * 1024)} MB."
        )

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CatalogLoadError(f"Could not read catalog file {path}: {exc}")

    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            return yaml.safe_load(text)
        return json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise CatalogLoadError(f"Catalog file {path} is not valid: {exc}")


def _validate_catalog_structure(data: Any) -> None:
    """Check the top-level shape of a parsed catalog.

    Raises:
        CatalogLoadError: If the data cannot be a catalog.
    """
    if not isinstance(data, dict):
        raise CatalogLoadError("Catalog must be a JSON/YAML object.")

    if "models" not in data:
        raise CatalogLoadError("Catalog is missing the required 'models' field.")

    models = data["models"]
    if not isinstance(models, list):
        raise CatalogLoadError("'models' must be a list.")

    if len(models) > MAX_MODEL_COUNT:
        raise CatalogLoadError(
            f"Catalog contains {len(models)} models, which exceeds "
            f"the maximum of {MAX_MODEL_COUNT}. This may not be a valid catalog."
        )


def _placeholder_entry(raw: Any, index: int, error: str) -> BusinessModelDefinition:
    """Build a minimal definition for an entry that failed validation."""
    model_id = None
    name = None
    if isinstance(raw, dict):
        model_id = raw.get("id")
        name = raw.get("name") or raw.get("title")
    if not isinstance(model_id, str) or not model_id.strip():
        model_id = f"entry-{index}"

    return BusinessModelDefinition(
        id=model_id,
        name=name if isinstance(name, str) else "",
        load_warnings=[f"Entry failed validation and was loaded without scoring data: {error}"],
    )


def parse_entry(raw: Any, index: int = 0) -> BusinessModelDefinition:
    """Validate one catalog entry, falling back to a placeholder on error."""
    try:
        return BusinessModelDefinition.model_validate(raw)
    except ValidationError as exc:
        summary = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'entry'}: {err['msg']}"
            for err in exc.errors()
        )
        logger.warning("Catalog entry %d is malformed (%s); using neutral placeholder", index, summary)
        return _placeholder_entry(raw, index, summary)


def parse_catalog(data: Any, source: str = "inline") -> BusinessCatalog:
    """Build a catalog from already-parsed data.

    Args:
        data: Mapping with a 'models' list and optional metadata.
        source: Description of where the data came from.

    Returns:
        The validated catalog. Malformed entries are kept as placeholders.

    Raises:
        CatalogLoadError: If the top-level structure is invalid.
    """
    _validate_catalog_structure(data)

    models = [parse_entry(raw, i) for i, raw in enumerate(data["models"])]

    seen: set[str] = set()
    for model in models:
        if model.id in seen:
            logger.warning("Duplicate business model id '%s' in catalog %s", model.id, source)
        seen.add(model.id)

    metadata: dict[str, Any] = {"source": source, "models": models}
    if data.get("version") is not None:
        metadata["version"] = str(data["version"])
    if data.get("generated_at"):
        metadata["generated_at"] = data["generated_at"]

    try:
        catalog = BusinessCatalog(**metadata)
    except ValidationError as exc:
        raise CatalogLoadError(f"Catalog metadata failed validation: {exc}")

    logger.debug("Loaded %d business models from %s", catalog.total_models, source)
    return catalog


def load_catalog(path: Union[str, Path]) -> BusinessCatalog:
    """Load a catalog from a JSON or YAML file.

    Args:
        path: Path to the catalog file.

    Returns:
        The loaded BusinessCatalog.

    Raises:
        CatalogLoadError: On any read, parse or structure failure.
    """
    path = Path(path)
    data = _read_catalog_file(path)
    return parse_catalog(data, source=str(path))


def load_default_catalog() -> BusinessCatalog:
    """Load the catalog bundled with the package."""
    data = _read_catalog_file(DEFAULT_CATALOG_PATH)
    return parse_catalog(data, source="bundled")


def validate_catalog_file(path: Union[str, Path]) -> tuple[bool, list[str]]:
    """Validate a catalog file.

    Returns:
        Tuple of (is_valid, issues). Recovered entry problems are reported
        as issues but do not make the catalog invalid.
    """
    issues: list[str] = []
    try:
        catalog = load_catalog(path)
    except CatalogLoadError as exc:
        return False, [str(exc)]

    if not catalog.models:
        issues.append("Catalog contains no business models")

    for model in catalog.models:
        for warning in model.load_warnings:
            issues.append(f"{model.id}: {warning}")
        if not model.trait_requirements:
            issues.append(f"{model.id}: no trait requirements (will score neutrally)")

    has_errors = any("failed validation" in issue for issue in issues)
    return not has_errors, issues


def find_model(catalog: BusinessCatalog, model_id: str) -> Optional[BusinessModelDefinition]:
    """Find a business model by id, ignoring case."""
    model_id = model_id.strip().lower()
    return next((m for m in catalog.models if m.id.lower() == model_id), None)
