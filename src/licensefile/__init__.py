"""Signed license files: issue and validate."""

from importlib.metadata import PackageNotFoundError, version as _dist_version

try:
    __version__ = _dist_version("licensefile")
except PackageNotFoundError:
    __version__ = "0.0.0"

from licensefile.canonical import LicenseFields, canonicalize
from licensefile.config import DEFAULT_CONFIG, LicenseConfig
from licensefile.core import ValidationResult, issue_license, validate_license
from licensefile.errors import (
    ExtractionError,
    FormatError,
    InputError,
    KeyMaterialError,
    LicenseFileError,
    TemplateError,
)
from licensefile.extract import (
    CallableExtractor,
    DefaultExtractor,
    ExtractionResult,
    Extractor,
    LineExtractor,
)
from licensefile.signing import sign, verify
from licensefile.template import DEFAULT_TEMPLATE, render

__all__ = [
    "__version__",
    "CallableExtractor",
    "DEFAULT_CONFIG",
    "DEFAULT_TEMPLATE",
    "DefaultExtractor",
    "ExtractionError",
    "ExtractionResult",
    "Extractor",
    "FormatError",
    "InputError",
    "KeyMaterialError",
    "LicenseConfig",
    "LicenseFields",
    "LicenseFileError",
    "LineExtractor",
    "TemplateError",
    "ValidationResult",
    "canonicalize",
    "issue_license",
    "render",
    "sign",
    "validate_license",
    "verify",
]
