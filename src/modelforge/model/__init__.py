"""Model declaration and instance state."""

from modelforge.model.instance import Instance
from modelforge.model.model_class import ModelClass, model
from modelforge.model.store import AttributeStore, same_value

__all__ = ["AttributeStore", "Instance", "ModelClass", "model", "same_value"]
