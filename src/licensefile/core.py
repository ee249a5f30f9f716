"""Issue and validate signed license files."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from licensefile.canonical import LicenseData, LicenseFields, canonicalize, normalize_license_data
from licensefile.config import DEFAULT_CONFIG, LicenseConfig
from licensefile.errors import InputError
from licensefile.extract import Extractor, run_extractor
from licensefile.keys import KeySource, is_key_reference
from licensefile.signing import sign, verify
from licensefile.template import DEFAULT_TEMPLATE, SERIAL_FIELD, render

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    signature: str
    data: LicenseData

    def to_dict(self) -> dict:
        data = self.data.as_dict() if isinstance(self.data, LicenseFields) else self.data
        return {"valid": bool(self.valid), "signature": self.signature, "data": data}


def _is_missing_data(data: object) -> bool:
    if data is None:
        return True
    if isinstance(data, (str, Mapping, LicenseFields)):
        return len(data) == 0
    return False


def _data_values(data: LicenseData) -> list[str]:
    if isinstance(data, str):
        return [data]
    return [value for _, value in data]


def issue_license(
    data: object,
    private_key: KeySource,
    *,
    template: str | None = None,
    config: LicenseConfig | None = None,
    password: bytes | None = None,
) -> str:
    """Sign ``data`` and render it into a license artifact.

    ``template`` overrides ``config.template``; with neither set the built-in
    four-line template is used. Raises ``InputError`` before any key I/O when
    the data or the key reference is missing.
    """
    cfg = config if config is not None else DEFAULT_CONFIG
    if _is_missing_data(data):
        raise InputError("license data is required")
    if not is_key_reference(private_key):
        raise InputError("private key is required")
    template_text = template if template is not None else cfg.resolved_template()
    if not isinstance(template_text, str) or not template_text:
        raise InputError("template must be a non-empty string")

    normalized = normalize_license_data(data)
    if isinstance(normalized, LicenseFields) and SERIAL_FIELD in normalized:
        raise InputError(f"field name {SERIAL_FIELD!r} is reserved for the signature")
    default_template = template_text == DEFAULT_TEMPLATE
    # The default extractor splits on "\n"; a "\r" becomes a line break once the
    # file is read back with universal newlines.
    if default_template and any(
        "\n" in value or "\r" in value for value in _data_values(normalized)
    ):
        raise InputError("default template cannot hold data containing line breaks")

    log.debug(
        "issuing license: fields=%d template=%s",
        1 if isinstance(normalized, str) else len(normalized),
        "default" if default_template else "custom",
    )
    serial = sign(canonicalize(normalized), private_key, password=password)
    return render(template_text, normalized, serial, strict=cfg.strict_template)


def validate_license(
    artifact: str,
    public_key: KeySource,
    *,
    extractor: Extractor | None = None,
    config: LicenseConfig | None = None,
) -> ValidationResult:
    """Extract data and serial from ``artifact`` and check the signature.

    A signature that does not match is reported as ``valid=False``; only
    structural failures raise.
    """
    cfg = config if config is not None else DEFAULT_CONFIG
    if not isinstance(artifact, str):
        raise InputError("license artifact must be a string")
    if not is_key_reference(public_key):
        raise InputError("public key is required")
    strategy = extractor if extractor is not None else cfg.resolved_extractor()

    log.debug("validating license with %r", strategy)
    extracted = run_extractor(strategy, artifact)
    valid = verify(canonicalize(extracted.data), extracted.serial, public_key)
    log.info("license signature %s", "valid" if valid else "invalid")
    return ValidationResult(valid=valid, signature=extracted.serial, data=extracted.data)
