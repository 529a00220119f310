"""YAML model definitions: validation and loading."""

from modelforge.schema.loader import SchemaLoader
from modelforge.schema.validator import SchemaIssue, validate_schema_dir, validate_schema_file

__all__ = ["SchemaIssue", "SchemaLoader", "validate_schema_dir", "validate_schema_file"]
