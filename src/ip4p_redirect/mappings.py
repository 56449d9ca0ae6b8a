"""Identifier → domain table. Built once at startup, read-only afterwards."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class Mapping:
    identifier: str
    domain: str


class MappingTable:
    """Static authorization table. Only identifiers listed here are servable.

    Identifiers are matched by exact string equality. Duplicates keep
    the first entry; an entry with an empty domain counts as absent.
    """

    __slots__ = ("_mappings", "_index")

    def __init__(self, mappings: Iterable[Mapping] = ()) -> None:
        self._mappings = tuple(mappings)
        index: dict[str, str] = {}
        for mapping in self._mappings:
            index.setdefault(mapping.identifier, mapping.domain)
        self._index = index

    @classmethod
    def from_dict(cls, pairs: dict[str, str]) -> MappingTable:
        return cls(Mapping(identifier, domain) for identifier, domain in pairs.items())

    def lookup(self, identifier: str) -> str | None:
        return self._index.get(identifier) or None

    def __contains__(self, identifier: object) -> bool:
        return isinstance(identifier, str) and self.lookup(identifier) is not None

    def __iter__(self) -> Iterator[Mapping]:
        return iter(self._mappings)

    def __len__(self) -> int:
        return len(self._mappings)

    def __repr__(self) -> str:
        return f"MappingTable({len(self)} mappings)"
