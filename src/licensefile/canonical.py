"""Canonical byte form for signed license data.

String data is signed as its UTF-8 bytes. Record data is signed as a compact
JSON object whose key order is the record's field order, so the same fields in
a different order produce different bytes and a different signature.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Union

from licensefile.errors import InputError


@dataclass(frozen=True)
class LicenseFields:
    """Immutable ordered sequence of ``(name, value)`` license fields."""

    pairs: tuple[tuple[str, str], ...]

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for idx, pair in enumerate(self.pairs):
            if not isinstance(pair, tuple) or len(pair) != 2:
                raise InputError(f"field[{idx}] must be a (name, value) pair")
            name, value = pair
            if not isinstance(name, str) or not name:
                raise InputError(f"field[{idx}] name must be a non-empty string")
            if not isinstance(value, str):
                raise InputError(f"field {name!r} value must be a string")
            if name in seen:
                raise InputError(f"duplicate field name: {name!r}")
            seen.add(name)

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> "LicenseFields":
        return cls(tuple(tuple(pair) for pair in pairs))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> "LicenseFields":
        return cls(tuple((name, value) for name, value in mapping.items()))

    def names(self) -> list[str]:
        return [name for name, _ in self.pairs]

    def get(self, name: str, default: str | None = None) -> str | None:
        for key, value in self.pairs:
            if key == name:
                return value
        return default

    def as_dict(self) -> dict[str, str]:
        return dict(self.pairs)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)

    def __contains__(self, name: object) -> bool:
        return any(key == name for key, _ in self.pairs)


LicenseData = Union[str, LicenseFields]


def normalize_license_data(data: object) -> LicenseData:
    """Validate caller data and convert records to ``LicenseFields``."""
    if isinstance(data, LicenseFields):
        return data
    if isinstance(data, str):
        return data
    if isinstance(data, Mapping):
        return LicenseFields.from_mapping(data)
    raise InputError(
        f"license data must be a string or a mapping of strings, got {type(data).__name__}"
    )


def canonical_json_bytes(fields: LicenseFields) -> bytes:
    """Serialize fields to compact UTF-8 JSON, keeping field order."""
    return json.dumps(
        fields.as_dict(),
        separators=(",", ":"),
        ensure_ascii=False,
    ).encode("utf-8")


def canonicalize(data: object) -> bytes:
    """Return the exact bytes that get signed and verified for ``data``."""
    normalized = normalize_license_data(data)
    try:
        if isinstance(normalized, str):
            return normalized.encode("utf-8")
        return canonical_json_bytes(normalized)
    except UnicodeEncodeError as exc:
        raise InputError(f"license data is not encodable as UTF-8: {exc}") from exc
