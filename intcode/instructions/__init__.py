from .registry import InstructionSetRegistry, get_registry
from .types import InstructionEntry, ParamRole

__all__ = [
    # Enums
    "ParamRole",
    # Registry entry types (frozen, loaded from YAML)
    "InstructionEntry",
    # Registry
    "InstructionSetRegistry",
    "get_registry",
]
