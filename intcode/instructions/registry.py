"""
Instruction set registry: loads the opcode table from YAML at startup,
validates it, and exposes a read-only query API.

The registry is a module-level singleton; call get_registry() to obtain it.
The table is loaded and validated once at import time. Nothing writes to the
registry after startup.

──────────────────────────────────────────────────────────────────────────────
handler contract
──────────────────────────────────────────────────────────────────────────────
Each entry carries a handler field: the name of a function in
intcode.operations that implements the opcode.

Expected signature:
    def <handler>(memory: intcode.memory.Memory,
                  io: intcode.io.IOChannel,
                  addresses: Sequence[int]) -> StepResult | None:
        ...

The handler receives one resolved address per declared parameter. It returns
the next instruction pointer (and optionally an output value) or None to halt.
The registry only stores the name string; operations.build_operations()
resolves it and rejects names it does not know.
──────────────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, cast

import yaml

from ..errors import InstructionSetError
from .types import InstructionEntry, ParamRole

logger = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).parent / "data"
_INSTRUCTIONS_FILE = "instructions.yaml"


class InstructionSetRegistry:
    """
    Read-only registry of instruction set metadata.

    ``entries`` is wrapped in MappingProxyType after loading and is immutable
    for the lifetime of the registry instance.

    Instantiate directly to use a custom data directory (e.g. in tests);
    otherwise use get_registry() for the module singleton.
    """

    def __init__(self, data_dir: Path = _DATA_DIR) -> None:
        self._data_dir = data_dir
        self.entries: MappingProxyType[int, InstructionEntry]

        self._load_entries()
        logger.debug("Loaded %d instructions from %s", len(self.entries), data_dir)

    # ── Loading ────────────────────────────────────────────────────────────────

    def _load_yaml(self, filename: str) -> dict[str, Any]:
        path = self._data_dir / filename
        try:
            with open(path) as f:
                return cast(dict[str, Any], yaml.safe_load(f))
        except FileNotFoundError:
            raise FileNotFoundError(f"Instruction set file not found: {path}") from None
        except yaml.YAMLError as exc:
            raise InstructionSetError(
                f"Failed to parse instruction set file {path}: {exc}"
            ) from exc

    def _load_entries(self) -> None:
        data = self._load_yaml(_INSTRUCTIONS_FILE)
        if not isinstance(data, dict) or not isinstance(data.get("entries"), list):
            raise InstructionSetError(
                f"{_INSTRUCTIONS_FILE}: expected a mapping with an 'entries' list"
            )

        errors: list[str] = []
        result: dict[int, InstructionEntry] = {}
        for index, raw in enumerate(data["entries"]):
            entry = self._build_entry(index, raw, errors)
            if entry is None:
                continue
            if entry.opcode in result:
                errors.append(f"entry {index}: duplicate opcode {entry.opcode}")
                continue
            result[entry.opcode] = entry

        if errors:
            raise InstructionSetError(
                "Instruction set validation failed:\n" + "\n".join(f"  • {e}" for e in errors)
            )
        self.entries = MappingProxyType(result)

    def _build_entry(
        self, index: int, raw: Any, errors: list[str]
    ) -> InstructionEntry | None:
        """Convert one raw YAML entry, appending every problem found to *errors*."""
        prefix = f"entry {index}"
        if not isinstance(raw, dict):
            errors.append(f"{prefix}: expected a mapping, got {type(raw).__name__}")
            return None

        missing = [key for key in ("opcode", "mnemonic", "handler", "params") if key not in raw]
        if missing:
            errors.append(f"{prefix}: missing keys {', '.join(missing)}")
            return None

        opcode = raw["opcode"]
        if not isinstance(opcode, int) or isinstance(opcode, bool) or not 0 <= opcode <= 99:
            errors.append(f"{prefix}: opcode must be an integer in 0..99, got {opcode!r}")
            return None

        prefix = f"opcode {opcode}"
        try:
            params = tuple(ParamRole(role) for role in raw["params"] or ())
        except (TypeError, ValueError):
            errors.append(
                f"{prefix}: params must be a list of 'read'/'write', got {raw['params']!r}"
            )
            return None

        writes = [i for i, role in enumerate(params) if role == ParamRole.WRITE]
        if len(writes) > 1:
            errors.append(f"{prefix}: declares {len(writes)} write parameters (max 1)")
        elif writes and writes[0] != len(params) - 1:
            errors.append(f"{prefix}: write parameter must be the last parameter")

        return InstructionEntry(
            opcode=opcode,
            mnemonic=str(raw["mnemonic"]),
            handler=str(raw["handler"]),
            params=params,
            description=str(raw.get("description", "")).strip(),
        )


# ── Module-level singleton ─────────────────────────────────────────────────────
#
# Initialized eagerly at import time. The registry is read-only after
# construction, so sharing it across threads is safe.

_registry: InstructionSetRegistry = InstructionSetRegistry()


def get_registry() -> InstructionSetRegistry:
    """Return the module-level registry singleton."""
    return _registry
