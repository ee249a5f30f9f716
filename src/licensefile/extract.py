"""Recover the signed data and serial from a rendered license artifact.

Extractors only parse. Signature checks happen in ``licensefile.core``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from licensefile.canonical import LicenseData, LicenseFields, normalize_license_data
from licensefile.errors import ExtractionError, FormatError, LicenseFileError

DEFAULT_LINE_COUNT = 4


@dataclass(frozen=True)
class ExtractionResult:
    serial: str
    data: LicenseData


@runtime_checkable
class Extractor(Protocol):
    def extract(self, artifact: str) -> ExtractionResult:
        ...


def _split_lines(artifact: str, expected: int) -> list[str]:
    if not isinstance(artifact, str):
        raise FormatError("license artifact must be text")
    lines = artifact.split("\n")
    if len(lines) != expected:
        raise FormatError(f"license file must have {expected} lines, actual: {len(lines)}")
    return lines


class DefaultExtractor:
    """Four lines: marker, data, serial, marker. Marker text is not checked."""

    def extract(self, artifact: str) -> ExtractionResult:
        lines = _split_lines(artifact, DEFAULT_LINE_COUNT)
        data, serial = lines[1], lines[2]
        if not serial:
            raise FormatError("license file serial line is empty")
        return ExtractionResult(serial=serial, data=data)

    def __repr__(self) -> str:
        return "DefaultExtractor()"


class LineExtractor:
    """One field value per line, then the serial line, between marker lines."""

    def __init__(
        self,
        field_names: Sequence[str],
        *,
        header_lines: int = 1,
        footer_lines: int = 1,
    ) -> None:
        names = list(field_names)
        if not names:
            raise ExtractionError("field_names must not be empty")
        if header_lines < 0 or footer_lines < 0:
            raise ExtractionError("header_lines and footer_lines must be >= 0")
        # Validates names up front: non-empty strings, no duplicates.
        LicenseFields.from_pairs((name, "") for name in names)
        self.field_names = tuple(names)
        self.header_lines = header_lines
        self.footer_lines = footer_lines

    @property
    def line_count(self) -> int:
        return self.header_lines + len(self.field_names) + 1 + self.footer_lines

    def extract(self, artifact: str) -> ExtractionResult:
        lines = _split_lines(artifact, self.line_count)
        start = self.header_lines
        values = lines[start : start + len(self.field_names)]
        serial = lines[start + len(self.field_names)]
        if not serial:
            raise FormatError("license file serial line is empty")
        return ExtractionResult(
            serial=serial,
            data=LicenseFields.from_pairs(zip(self.field_names, values)),
        )

    def __repr__(self) -> str:
        return f"LineExtractor({list(self.field_names)!r})"


class CallableExtractor:
    """Adapts a plain ``artifact -> result`` function to the Extractor protocol.

    The function may return an ``ExtractionResult`` or a mapping with
    ``serial`` and ``data`` keys.
    """

    def __init__(self, func: Callable[[str], object]) -> None:
        if not callable(func):
            raise ExtractionError("extractor function must be callable")
        self.func = func

    def extract(self, artifact: str) -> ExtractionResult:
        return check_extraction(self.func(artifact))

    def __repr__(self) -> str:
        name = getattr(self.func, "__name__", type(self.func).__name__)
        return f"CallableExtractor({name})"


def check_extraction(raw: object) -> ExtractionResult:
    """Enforce the serial/data contract on a custom extractor's output."""
    if isinstance(raw, ExtractionResult):
        serial, data = raw.serial, raw.data
    elif isinstance(raw, Mapping):
        serial, data = raw.get("serial"), raw.get("data")
    else:
        raise ExtractionError(
            f"extractor must return serial and data, got {type(raw).__name__}"
        )

    if not isinstance(serial, str):
        raise ExtractionError("serial string was not returned by extractor")
    if not serial:
        raise ExtractionError("serial returned by extractor is empty")
    if not isinstance(data, (str, Mapping, LicenseFields)):
        raise ExtractionError("data string/mapping was not returned by extractor")
    try:
        normalized = normalize_license_data(data)
    except LicenseFileError as exc:
        raise ExtractionError(f"data returned by extractor is invalid: {exc}") from exc
    return ExtractionResult(serial=serial, data=normalized)


def run_extractor(extractor: Extractor, artifact: str) -> ExtractionResult:
    """Run any strategy and apply the contract check to its output."""
    if not isinstance(extractor, Extractor):
        raise ExtractionError(f"{type(extractor).__name__} has no extract(artifact) method")
    try:
        raw = extractor.extract(artifact)
    except LicenseFileError:
        raise
    except Exception as exc:
        raise ExtractionError(f"{extractor!r} failed: {type(exc).__name__}: {exc}") from exc
    return check_extraction(raw)
