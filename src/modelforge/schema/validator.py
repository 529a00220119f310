"""
schema/validator.py: JSON Schema validation for modelforge YAML model files.

Usage:
    from modelforge.schema.validator import validate_schema_dir, validate_schema_file

    issues = validate_schema_dir(Path("models"))
    for issue in issues:
        print(issue)

Beyond the JSON Schema itself, a few cross-field checks run per document:
duplicate attribute names and a ``primaryKey`` that names no attribute are
errors, attributes without an explicit ``type`` are warnings.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Public data types
# ---------------------------------------------------------------------------

_SCHEMA_PATH = Path(__file__).parent / "schemas" / "model.schema.json"

SCHEMA_SUFFIXES = (".yaml", ".yml")


@dataclass
class SchemaIssue:
    """A single validation finding for a model YAML file."""

    file: Path
    message: str
    path: str = ""          # location within the document, e.g. "attributes[0]/type"
    severity: str = "error" # "error" | "warning"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        return f"[{self.severity.upper()}] {self.file}{loc}: {self.message}"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def _load_schema() -> dict[str, Any]:
    with _SCHEMA_PATH.open() as fh:
        return json.load(fh)


def _json_path(error: ValidationError) -> str:
    """Convert a jsonschema ValidationError path to a readable string."""
    parts = []
    for p in error.absolute_path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append(str(p))
    return "/".join(parts).replace("/[", "[")


def _semantic_issues(doc: dict[str, Any], yaml_path: Path) -> list[SchemaIssue]:
    issues: list[SchemaIssue] = []
    declared = doc.get("attributes")
    if not isinstance(declared, list):
        return issues
    attributes = [a for a in declared if isinstance(a, dict)]

    seen: set[str] = set()
    for i, attr in enumerate(attributes):
        name = attr.get("name")
        if name in seen:
            issues.append(
                SchemaIssue(
                    file=yaml_path,
                    message=f"Duplicate attribute '{name}'",
                    path=f"attributes[{i}]/name",
                )
            )
        seen.add(name)
        if "type" not in attr:
            issues.append(
                SchemaIssue(
                    file=yaml_path,
                    message=f"Attribute '{name}' has no type; defaulting to 'any'",
                    path=f"attributes[{i}]",
                    severity="warning",
                )
            )

    primary_key = doc.get("primaryKey")
    if primary_key and primary_key not in seen:
        issues.append(
            SchemaIssue(
                file=yaml_path,
                message=f"primaryKey '{primary_key}' is not a declared attribute",
                path="primaryKey",
            )
        )

    flagged = [a.get("name") for a in attributes if a.get("primaryKey")]
    if len(flagged) > 1:
        issues.append(
            SchemaIssue(
                file=yaml_path,
                message=f"More than one attribute is marked primaryKey: {', '.join(str(n) for n in flagged)}",
            )
        )
    return issues


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_schema_file(yaml_path: Path) -> list[SchemaIssue]:
    """
    Validate a single model YAML file.

    Returns:
        A list of :class:`SchemaIssue` objects (empty on success).
    """
    try:
        with yaml_path.open() as fh:
            doc = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        return [SchemaIssue(file=yaml_path, message=f"YAML parse error: {exc}")]

    if doc is None:
        return [
            SchemaIssue(file=yaml_path, message="File is empty or contains only whitespace")
        ]

    validator = Draft202012Validator(_load_schema())
    issues = [
        SchemaIssue(file=yaml_path, message=error.message, path=_json_path(error))
        for error in sorted(validator.iter_errors(doc), key=lambda e: [str(p) for p in e.path])
    ]
    if isinstance(doc, dict):
        issues.extend(_semantic_issues(doc, yaml_path))
    return issues


def validate_schema_dir(schema_dir: Path, *, strict: bool = False) -> list[SchemaIssue]:
    """
    Validate every ``.yaml`` / ``.yml`` file directly under *schema_dir*.

    Args:
        schema_dir: Directory holding model definitions.
        strict:     If ``True``, warnings are escalated to errors.

    Returns:
        A flat list of :class:`SchemaIssue` objects across all files.
    """
    if not schema_dir.is_dir():
        return [
            SchemaIssue(
                file=schema_dir,
                message=f"Schema directory does not exist: {schema_dir}",
            )
        ]

    all_issues: list[SchemaIssue] = []
    files = sorted(p for p in schema_dir.iterdir() if p.suffix in SCHEMA_SUFFIXES)
    if not files:
        logger.warning("No model files found in %s", schema_dir)

    for yaml_file in files:
        all_issues.extend(validate_schema_file(yaml_file))

    if strict:
        for issue in all_issues:
            if issue.severity == "warning":
                issue.severity = "error"
    return all_issues
