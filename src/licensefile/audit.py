"""JSONL event records for license issuance and validation.

Records carry the data fingerprint (SHA-256 of the canonical bytes), never the
serial or key material.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from licensefile.canonical import LicenseData, LicenseFields, canonicalize, normalize_license_data
from licensefile.core import ValidationResult
from licensefile.errors import LicenseFileError

SCHEMA_VERSION = "license_event.v0"

EVENT_ISSUED = "license_issued"
EVENT_VALIDATED = "license_validated"
EVENT_ISSUE_ERROR = "license_issue_error"
EVENT_VALIDATE_ERROR = "license_validate_error"


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def data_fingerprint(data: LicenseData) -> str:
    return hashlib.sha256(canonicalize(data)).hexdigest()


def _field_names(data: LicenseData) -> list[str]:
    return data.names() if isinstance(data, LicenseFields) else []


@dataclass(frozen=True)
class IssueRecord:
    out: str | None
    template: str | None
    data_kind: str
    field_names: list[str]
    data_sha256: str
    event: str = field(default=EVENT_ISSUED, init=False)

    @classmethod
    def build(cls, data: object, *, out: str | None, template: str | None) -> "IssueRecord":
        data = normalize_license_data(data)
        return cls(
            out=out,
            template=template,
            data_kind="string" if isinstance(data, str) else "fields",
            field_names=_field_names(data),
            data_sha256=data_fingerprint(data),
        )


@dataclass(frozen=True)
class ValidateRecord:
    license_path: str
    valid: bool
    data_kind: str
    field_names: list[str]
    data_sha256: str
    event: str = field(default=EVENT_VALIDATED, init=False)

    @classmethod
    def build(cls, result: ValidationResult, *, license_path: Path) -> "ValidateRecord":
        return cls(
            license_path=str(license_path),
            valid=bool(result.valid),
            data_kind="string" if isinstance(result.data, str) else "fields",
            field_names=_field_names(result.data),
            data_sha256=data_fingerprint(result.data),
        )


@dataclass(frozen=True)
class ErrorRecord:
    event: str
    kind: str
    error: str
    license_path: str | None = None

    @classmethod
    def build(
        cls, event: str, exc: LicenseFileError, *, license_path: Path | None = None
    ) -> "ErrorRecord":
        return cls(
            event=event,
            kind=type(exc).__name__,
            error=str(exc),
            license_path=str(license_path) if license_path is not None else None,
        )


@dataclass
class LicenseEventLog:
    path: Path

    def emit(self, record: IssueRecord | ValidateRecord | ErrorRecord) -> None:
        payload = asdict(record)
        event = payload.pop("event")
        line = {
            "schema_version": SCHEMA_VERSION,
            "ts": _utc_now(),
            "event": event,
            "payload": payload,
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(line, sort_keys=True, separators=(",", ":"), ensure_ascii=False))
            f.write("\n")

    def issued(self, data: object, *, out: str | None, template: str | None) -> None:
        self.emit(IssueRecord.build(data, out=out, template=template))

    def validated(self, result: ValidationResult, *, license_path: Path) -> None:
        self.emit(ValidateRecord.build(result, license_path=license_path))

    def issue_failed(self, exc: LicenseFileError) -> None:
        self.emit(ErrorRecord.build(EVENT_ISSUE_ERROR, exc))

    def validate_failed(self, exc: LicenseFileError, *, license_path: Path) -> None:
        self.emit(ErrorRecord.build(EVENT_VALIDATE_ERROR, exc, license_path=license_path))
