"""Error hierarchy for license issuance and validation."""

from __future__ import annotations


class LicenseFileError(ValueError):
    """Base class for every licensefile failure."""


class InputError(LicenseFileError):
    """Raised when a required argument is missing or has the wrong shape."""


class KeyMaterialError(LicenseFileError):
    """Raised when key material cannot be read or parsed as a supported key."""


class FormatError(LicenseFileError):
    """Raised when a license artifact does not have the expected layout."""


class ExtractionError(LicenseFileError):
    """Raised when a custom extractor returns an unusable serial/data pair."""


class TemplateError(LicenseFileError):
    """Raised when a strict render meets placeholders with no field."""
