"""Autowiring data model and pass states."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path

from pywire.container.exceptions import AutoscanDirectoryNotFoundError


class PassState(Enum):
    """Stages of the autowiring pass, in pipeline order."""

    IDLE = auto()
    ROOTS_RESOLVED = auto()
    CANDIDATES_DISCOVERED = auto()
    TYPE_NAMES_DERIVED = auto()
    TYPES_VALIDATED = auto()
    ATTRIBUTES_MATCHED = auto()
    REGISTRATIONS_COMMITTED = auto()
    FAILED = auto()


@dataclass(frozen=True)
class ModuleRoot:
    """Binding of a dotted module prefix to the directory holding its sources."""

    prefix: str
    directory: str

    def resolve(self) -> ModuleRoot:
        """Return a copy with the directory canonicalised.

        Raises:
            AutoscanDirectoryNotFoundError: If the directory does not exist.
        """
        if not os.path.isdir(self.directory):
            raise AutoscanDirectoryNotFoundError(str(self.directory))
        return ModuleRoot(prefix=self.prefix, directory=os.path.realpath(self.directory))

    def module_name(self, relative: str) -> str:
        """Join the root prefix and a dotted path relative to the root."""
        prefix = self.prefix.rstrip(".")
        if not prefix:
            return relative
        if not relative:
            return prefix
        return f"{prefix}.{relative}"

    @classmethod
    def from_mapping(cls, roots: dict[str, str | Path]) -> list[ModuleRoot]:
        """Build roots from a prefix -> directory mapping, keeping its order."""
        return [cls(prefix=prefix, directory=str(directory)) for prefix, directory in roots.items()]


@dataclass(frozen=True)
class ServiceRegistration:
    """A planned service registration produced by the autowiring pass."""

    service_id: str
    impl_type: type
    source_file: str
    needs_explicit_file: bool = False
