"""Load ModelClass definitions from YAML files."""

import copy
import logging
from pathlib import Path
from typing import Any

import yaml

from modelforge.core.types import UNSET
from modelforge.errors import SchemaError
from modelforge.model.model_class import ModelClass
from modelforge.schema.validator import SCHEMA_SUFFIXES
from modelforge.validation.validators import from_rules

logger = logging.getLogger(__name__)


class SchemaLoader:
    """Builds ModelClass objects from a YAML file or a directory of them.

    Example:
        loader = SchemaLoader(Path("models"))
        models = loader.load_all(adapter=MemoryAdapter())
        User = models["User"]
    """

    def __init__(self, path: Path):
        self.path = path
        self.models: dict[str, ModelClass] = {}

    def _files(self) -> list[Path]:
        if self.path.is_file():
            return [self.path]
        if not self.path.is_dir():
            raise SchemaError(f"Schema path does not exist: {self.path}")
        return sorted(p for p in self.path.iterdir() if p.suffix in SCHEMA_SUFFIXES)

    def load_all(self, adapter: Any = None) -> dict[str, ModelClass]:
        """Load every model definition.

        Args:
            adapter: Persistence adapter given to every loaded ModelClass

        Raises:
            SchemaError: On malformed definitions or duplicate model names
        """
        for yaml_file in self._files():
            try:
                with open(yaml_file) as f:
                    data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise SchemaError(f"{yaml_file}: YAML parse error: {e}") from e

            if not data or "model" not in data:
                logger.debug("Skipping %s: no model definition", yaml_file)
                continue

            model = self._resolve_model(data, yaml_file, adapter)
            if model.name in self.models:
                raise SchemaError(f"{yaml_file}: model '{model.name}' is defined twice")
            self.models[model.name] = model

        return self.models

    def _resolve_model(self, data: dict, source: Path, adapter: Any) -> ModelClass:
        name = data["model"]
        attributes = data.get("attributes") or []

        try:
            # Find primary key
            primary_key = data.get("primaryKey", "id")
            for attr in attributes:
                if attr.get("primaryKey"):
                    primary_key = attr["name"]
                    break

            model = ModelClass(name, primary_key=primary_key, adapter=adapter)
            for attr in attributes:
                self._resolve_attribute(model, attr)
        except (AttributeError, KeyError, TypeError) as e:
            raise SchemaError(f"{source}: invalid attribute in '{name}': {e}") from e
        except SchemaError as e:
            raise SchemaError(f"{source}: {e}") from e

        logger.debug("Loaded model '%s' from %s", name, source)
        return model

    def _resolve_attribute(self, model: ModelClass, data: dict) -> None:
        attr_name = data["name"]
        default = data.get("default", UNSET)
        default_factory = None
        # Containers must not be shared between instances
        if isinstance(default, (list, dict)):
            default_factory = lambda value=default: copy.deepcopy(value)  # noqa: E731
            default = UNSET

        model.attr(
            attr_name,
            data.get("type", "any"),
            default=default,
            default_factory=default_factory,
            primary_key=bool(data.get("primaryKey", False)),
        )

        for validator in from_rules(attr_name, data.get("validation") or {}):
            model.validate(validator)

    def get_model(self, name: str) -> ModelClass | None:
        return self.models.get(name)

    def list_models(self) -> list[str]:
        return sorted(self.models.keys())
