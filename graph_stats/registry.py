"""Identifier to label indirection for Place and Organisation vertices.

Edge files reference places and organisations only by numeric identifier,
while the concrete label (City, Company, ...) lives in the vertex files.
The registry is filled while those vertex files are imported and read
while edge files are imported.
"""

from __future__ import annotations

import enum
from typing import Dict, Optional

from .errors import (
    DuplicateIdentifierError,
    InvalidIdentifierError,
    UnresolvedIdentifierError,
)

_MAX_IDENTIFIER = 2 ** 64 - 1


class IdentityFamily(enum.Enum):
    PLACE = "place"
    ORGANISATION = "organisation"


_FAMILY_BY_LABEL: Dict[str, IdentityFamily] = {
    "Place": IdentityFamily.PLACE,
    "City": IdentityFamily.PLACE,
    "Country": IdentityFamily.PLACE,
    "Continent": IdentityFamily.PLACE,
    "Organisation": IdentityFamily.ORGANISATION,
    "University": IdentityFamily.ORGANISATION,
    "Company": IdentityFamily.ORGANISATION,
}


def family_for_label(label: str) -> Optional[IdentityFamily]:
    return _FAMILY_BY_LABEL.get(label)


def parse_identifier(value: str) -> int:
    if not (value.isascii() and value.isdigit()):
        raise InvalidIdentifierError(f"Identifier is not an unsigned integer: {value!r}")
    identifier = int(value)
    if identifier > _MAX_IDENTIFIER:
        raise InvalidIdentifierError(f"Identifier exceeds 64 bits: {value!r}")
    return identifier


class IdentityRegistry:
    def __init__(self) -> None:
        self._maps: Dict[IdentityFamily, Dict[int, str]] = {
            family: {} for family in IdentityFamily
        }

    def register(self, family: IdentityFamily, identifier: int, label: str) -> None:
        mapping = self._maps[family]
        existing = mapping.get(identifier)
        if existing is not None:
            raise DuplicateIdentifierError(
                f"{family.value} identifier {identifier} registered twice "
                f"(as {existing!r} and {label!r})"
            )
        mapping[identifier] = label

    def resolve(self, family: IdentityFamily, identifier: int) -> str:
        try:
            return self._maps[family][identifier]
        except KeyError:
            raise UnresolvedIdentifierError(
                f"{family.value} identifier {identifier} was never imported"
            ) from None

    def size(self, family: IdentityFamily) -> int:
        return len(self._maps[family])

    def sizes(self) -> Dict[str, int]:
        return {family.value: len(mapping) for family, mapping in self._maps.items()}

    def __len__(self) -> int:
        return sum(len(mapping) for mapping in self._maps.values())
