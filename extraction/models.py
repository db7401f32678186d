"""
Data models for discovered PHP declarations.
"""

from __future__ import annotations

import enum
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, Tuple, Union

from core.names import is_valid_qualified_name, split_qualified_name


class DeclarationKind(enum.IntFlag):
    """Atomic declaration kinds. Values are single bits so they combine into masks."""

    INTERFACE = 1
    CLASS = 2
    ENUM = 4
    TRAIT = 8


_ATOMIC_KINDS: Tuple[DeclarationKind, ...] = (
    DeclarationKind.INTERFACE,
    DeclarationKind.CLASS,
    DeclarationKind.ENUM,
    DeclarationKind.TRAIT,
)

MODE_FIND_INTERFACES = int(DeclarationKind.INTERFACE)
MODE_FIND_CLASSES = int(DeclarationKind.CLASS)
MODE_FIND_ENUMS = int(DeclarationKind.ENUM)
MODE_FIND_TRAITS = int(DeclarationKind.TRAIT)
MODE_FIND_ALL = MODE_FIND_INTERFACES | MODE_FIND_CLASSES | MODE_FIND_ENUMS | MODE_FIND_TRAITS


def kind_from_name(name: str) -> DeclarationKind:
    """Look up a kind by case-insensitive name (``"class"``, ``"Trait"``...)."""
    try:
        return DeclarationKind[name.strip().upper()]
    except KeyError:
        valid = ", ".join(kind.name.lower() for kind in _ATOMIC_KINDS)
        raise ValueError(f"Unknown declaration kind {name!r}; expected one of: {valid}, all") from None


@dataclass(frozen=True)
class KindMask:
    """Bitset selecting which declaration kinds are extracted.

    Any integer is accepted; bits outside the four kind flags never match.
    """

    value: int = MODE_FIND_ALL

    def includes(self, kind: DeclarationKind) -> bool:
        return bool(self.value & kind)

    @property
    def kinds(self) -> Tuple[DeclarationKind, ...]:
        """Selected atomic kinds, in flag order."""
        return tuple(kind for kind in _ATOMIC_KINDS if self.includes(kind))

    def __or__(self, other: Union["KindMask", int]) -> "KindMask":
        other_value = other.value if isinstance(other, KindMask) else int(other)
        return KindMask(self.value | other_value)

    def __contains__(self, kind: DeclarationKind) -> bool:
        return self.includes(kind)

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "KindMask":
        value = 0
        for name in names:
            if name.strip().lower() == "all":
                value |= MODE_FIND_ALL
            else:
                value |= kind_from_name(name)
        return cls(value)

    @classmethod
    def coerce(cls, mode: Any) -> "KindMask":
        """Build a mask from a mask, an int/flag, a kind name or a list of names."""
        if isinstance(mode, KindMask):
            return mode
        if isinstance(mode, bool):
            raise TypeError("Declaration mode must not be a boolean")
        if isinstance(mode, int):
            return cls(int(mode))
        if isinstance(mode, str):
            return cls.from_names([mode])
        if isinstance(mode, (list, tuple, set, frozenset)):
            return cls.from_names(mode)
        raise TypeError(f"Unsupported declaration mode: {type(mode).__name__}")


@dataclass(frozen=True)
class DeclarationDescriptor:
    """A single discovered type declaration.

    Attributes:
        name: Fully-qualified name without leading separator (e.g. ``App\\Model\\User``)
        kind: One of the four declaration kinds
        file: Source file path as yielded by file discovery
        line: 1-indexed line the declaration starts on
    """

    name: str
    kind: DeclarationKind
    file: str
    line: int = 0

    def __post_init__(self) -> None:
        if not is_valid_qualified_name(self.name):
            raise ValueError(f"Invalid fully-qualified name: {self.name!r}")

    @property
    def short_name(self) -> str:
        return split_qualified_name(self.name)[1]

    @property
    def namespace(self) -> str:
        """Enclosing namespace, or an empty string for the global namespace."""
        return split_qualified_name(self.name)[0]

    def to_dict(self) -> Dict[str, Any]:
        """Convert the descriptor to a dictionary suitable for JSON serialization."""
        payload = asdict(self)
        payload["kind"] = self.kind.name.lower()
        return payload


class ScanStats:
    """Statistics for a single ``find`` call."""

    def __init__(self):
        self.files_discovered = 0
        self.files_parsed = 0
        self.files_skipped = 0
        self.declarations_found = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "files_discovered": self.files_discovered,
            "files_parsed": self.files_parsed,
            "files_skipped": self.files_skipped,
            "declarations_found": self.declarations_found,
        }

    def __str__(self) -> str:
        return (
            f"ScanStats(discovered={self.files_discovered}, "
            f"parsed={self.files_parsed}, skipped={self.files_skipped}, "
            f"declarations={self.declarations_found})"
        )
