# ast_nodes.py
# Tree shapes produced by the kvtree parser.
#
# The node set is closed: AstNode is a Union of frozen dataclasses, one per
# variant, and callers dispatch with isinstance. Nodes never hold references
# back to their parents, so every tree is acyclic and owned by whoever
# received it from the parser.

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Tuple, Union


@dataclass(frozen=True)
class KeyValue:
    """A single ``"key": value`` member of an object."""
    key: str
    value: "AstNode"


@dataclass(frozen=True)
class KeyValueList:
    """
    An object.

    ``entries`` keeps every member in source order, duplicates included.
    ``index`` is a read-only view mapping each distinct key to the value of
    its last occurrence. It is always derived from ``entries`` and takes no
    part in equality or hashing.
    """
    entries: Tuple[KeyValue, ...] = ()
    index: Mapping[str, "AstNode"] = field(init=False, repr=False, compare=False, hash=False)

    def __post_init__(self):
        pairs = tuple(self.entries)
        index: Dict[str, AstNode] = {}
        for entry in pairs:
            key, value = to_kv(entry)
            index[key] = value
        object.__setattr__(self, "entries", pairs)
        object.__setattr__(self, "index", MappingProxyType(index))

    @classmethod
    def from_entries(cls, entries: Iterable["AstNode"]) -> "KeyValueList":
        return cls(tuple(entries))

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return key in self.index

    def __getitem__(self, key: str) -> "AstNode":
        return self.index[key]

    def keys(self):
        return self.index.keys()


@dataclass(frozen=True)
class String:
    value: str


@dataclass(frozen=True)
class Integer:
    value: int


@dataclass(frozen=True)
class Float:
    value: float


@dataclass(frozen=True)
class List:
    """An array; ``items`` may be empty."""
    items: Tuple["AstNode", ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, i: int) -> "AstNode":
        return self.items[i]


@dataclass(frozen=True)
class Default:
    """Placeholder for a node slot that has not been filled yet. Never parsed."""


AstNode = Union[KeyValue, KeyValueList, String, Integer, Float, List, Default]

DEFAULT = Default()


def to_kv(node: AstNode) -> Tuple[str, AstNode]:
    """Unpack a KeyValue node; any other variant is a caller bug."""
    if not isinstance(node, KeyValue):
        raise TypeError(f"expected KeyValue node, got {type(node).__name__}")
    return node.key, node.value


__all__ = [
    "AstNode",
    "KeyValue",
    "KeyValueList",
    "String",
    "Integer",
    "Float",
    "List",
    "Default",
    "DEFAULT",
    "to_kv",
]
