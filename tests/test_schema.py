"""Tests for YAML model definitions: JSON Schema validation and loading."""

from pathlib import Path

import pytest

from modelforge import MemoryAdapter, SchemaError
from modelforge.core.types import AttributeType
from modelforge.schema import SchemaIssue, SchemaLoader, validate_schema_dir, validate_schema_file

USER_YAML = """\
model: User
attributes:
  - name: id
    type: number
  - name: name
    type: string
    default: Anonymous
    validation:
      required: true
      maxLength: 10
      pattern: "^[A-Z]"
  - name: tags
    type: any
    default: []
"""

POST_YAML = """\
model: Post
description: Blog post keyed by slug
attributes:
  - name: slug
    type: string
    primaryKey: true
  - name: title
    type: string
  - name: views
    type: number
    validation:
      min: 0
"""


def write(directory: Path, name: str, content: str) -> Path:
    path = directory / name
    path.write_text(content)
    return path


@pytest.fixture
def models_dir(tmp_path):
    write(tmp_path, "user.yaml", USER_YAML)
    write(tmp_path, "post.yml", POST_YAML)
    write(tmp_path, "README.md", "not a model")
    return tmp_path


# =============================================================================
# JSON Schema validation
# =============================================================================


class TestValidateSchemaFile:
    def test_valid_file(self, models_dir):
        assert validate_schema_file(models_dir / "user.yaml") == []

    def test_missing_attributes(self, tmp_path):
        path = write(tmp_path, "bad.yaml", "model: User\n")
        issues = validate_schema_file(path)
        assert len(issues) == 1
        assert "'attributes' is a required property" in issues[0].message
        assert issues[0].severity == "error"

    def test_unknown_type_path(self, tmp_path):
        path = write(
            tmp_path,
            "bad.yaml",
            "model: User\nattributes:\n  - name: born\n    type: date\n",
        )
        issues = validate_schema_file(path)
        assert [i.path for i in issues] == ["attributes[0]/type"]

    def test_unknown_property(self, tmp_path):
        path = write(
            tmp_path,
            "bad.yaml",
            "model: User\nattributes:\n  - name: id\n    type: number\n    unique: true\n",
        )
        issues = validate_schema_file(path)
        assert any("unique" in i.message for i in issues)

    def test_yaml_parse_error(self, tmp_path):
        path = write(tmp_path, "bad.yaml", "model: [unclosed\n")
        issues = validate_schema_file(path)
        assert issues[0].message.startswith("YAML parse error")

    def test_empty_file(self, tmp_path):
        path = write(tmp_path, "empty.yaml", "")
        issues = validate_schema_file(path)
        assert "empty" in issues[0].message

    def test_duplicate_attribute(self, tmp_path):
        path = write(
            tmp_path,
            "dup.yaml",
            "model: User\nattributes:\n"
            "  - {name: id, type: number}\n"
            "  - {name: id, type: string}\n",
        )
        issues = validate_schema_file(path)
        assert [i.message for i in issues] == ["Duplicate attribute 'id'"]
        assert issues[0].path == "attributes[1]/name"

    def test_primary_key_not_declared(self, tmp_path):
        path = write(
            tmp_path,
            "pk.yaml",
            "model: User\nprimaryKey: uuid\nattributes:\n  - {name: id, type: number}\n",
        )
        issues = validate_schema_file(path)
        assert issues[0].path == "primaryKey"

    def test_missing_type_is_warning(self, tmp_path):
        path = write(tmp_path, "w.yaml", "model: User\nattributes:\n  - name: id\n")
        issues = validate_schema_file(path)
        assert [i.severity for i in issues] == ["warning"]

    def test_issue_str(self, tmp_path):
        issue = SchemaIssue(file=tmp_path / "a.yaml", message="boom", path="model")
        assert str(issue) == f"[ERROR] {tmp_path / 'a.yaml'} at model: boom"


class TestValidateSchemaDir:
    def test_valid_dir(self, models_dir):
        assert validate_schema_dir(models_dir) == []

    def test_missing_dir(self, tmp_path):
        issues = validate_schema_dir(tmp_path / "nope")
        assert "does not exist" in issues[0].message

    def test_strict_escalates_warnings(self, tmp_path):
        write(tmp_path, "w.yaml", "model: User\nattributes:\n  - name: id\n")
        assert validate_schema_dir(tmp_path)[0].severity == "warning"
        assert validate_schema_dir(tmp_path, strict=True)[0].severity == "error"

    def test_empty_dir(self, tmp_path):
        assert validate_schema_dir(tmp_path) == []


# =============================================================================
# Loader
# =============================================================================


class TestSchemaLoader:
    def test_load_all(self, models_dir):
        loader = SchemaLoader(models_dir)
        models = loader.load_all()
        assert sorted(models) == ["Post", "User"]
        assert loader.list_models() == ["Post", "User"]
        assert loader.get_model("User") is models["User"]
        assert loader.get_model("Comment") is None

    def test_attributes_and_types(self, models_dir):
        User = SchemaLoader(models_dir).load_all()["User"]
        assert User.attributes() == ["id", "name", "tags"]
        assert User.schema["id"].type is AttributeType.NUMBER
        assert User.schema["id"].primary_key
        assert User.primary_key == "id"

    def test_primary_key_from_attribute(self, models_dir):
        Post = SchemaLoader(models_dir).load_all()["Post"]
        assert Post.primary_key == "slug"
        assert Post.schema["slug"].primary_key
        assert not Post.schema["title"].primary_key

    def test_defaults(self, models_dir):
        User = SchemaLoader(models_dir).load_all()["User"]
        a, b = User(), User()
        assert a.name == "Anonymous"
        a.tags.append("x")
        assert b.tags == []

    def test_validators_attached(self, models_dir):
        models = SchemaLoader(models_dir).load_all()
        User, Post = models["User"], models["Post"]

        assert User(name="Tobi").is_valid()
        assert not User(name="tobi").is_valid()
        assert not User(name="Abcdefghijk").is_valid()
        assert not User(name="").is_valid()
        assert not Post(views=-1).is_valid()

    @pytest.mark.asyncio
    async def test_adapter_attached(self, models_dir):
        store = MemoryAdapter()
        User = SchemaLoader(models_dir).load_all(adapter=store)["User"]
        assert User.adapter is store
        user = User(name="Tobi")
        await user.save()
        assert user.primary == 1

    def test_single_file(self, models_dir):
        loader = SchemaLoader(models_dir / "user.yaml")
        assert list(loader.load_all()) == ["User"]

    def test_skips_documents_without_model(self, tmp_path):
        write(tmp_path, "other.yaml", "kind: something-else\n")
        assert SchemaLoader(tmp_path).load_all() == {}

    def test_duplicate_model(self, tmp_path):
        write(tmp_path, "a.yaml", USER_YAML)
        write(tmp_path, "b.yaml", USER_YAML)
        with pytest.raises(SchemaError, match="defined twice"):
            SchemaLoader(tmp_path).load_all()

    def test_missing_attribute_name(self, tmp_path):
        write(tmp_path, "bad.yaml", "model: User\nattributes:\n  - type: number\n")
        with pytest.raises(SchemaError, match="invalid attribute"):
            SchemaLoader(tmp_path).load_all()

    def test_unknown_type(self, tmp_path):
        write(tmp_path, "bad.yaml", "model: User\nattributes:\n  - {name: born, type: date}\n")
        with pytest.raises(SchemaError, match="Unknown attribute type"):
            SchemaLoader(tmp_path).load_all()

    def test_yaml_error(self, tmp_path):
        write(tmp_path, "bad.yaml", "model: [unclosed\n")
        with pytest.raises(SchemaError, match="YAML parse error"):
            SchemaLoader(tmp_path).load_all()

    def test_missing_path(self, tmp_path):
        with pytest.raises(SchemaError, match="does not exist"):
            SchemaLoader(tmp_path / "nope").load_all()
