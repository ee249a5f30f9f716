"""Issue/validate options and CLI default path resolution."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from licensefile.extract import DefaultExtractor, Extractor
from licensefile.template import DEFAULT_TEMPLATE

PRIVATE_KEY_ENV_VAR = "LICENSEFILE_PRIVATE_KEY_PATH"
PUBLIC_KEY_ENV_VAR = "LICENSEFILE_PUBLIC_KEY_PATH"
LICENSE_ENV_VAR = "LICENSEFILE_LICENSE_PATH"

_HOME_CONFIG_DIR = Path(".config") / "licensefile"
PRIVATE_KEY_DEFAULT_FILENAME = "private_key.pem"
PUBLIC_KEY_DEFAULT_FILENAME = "public_key.pem"
LICENSE_DEFAULT_FILENAME = "license.lic"


@dataclass(frozen=True)
class LicenseConfig:
    """Unset fields resolve to the built-in template and the 4-line extractor."""

    template: str | None = None
    extractor: Extractor | None = None
    strict_template: bool = False

    def resolved_template(self) -> str:
        return self.template if self.template is not None else DEFAULT_TEMPLATE

    def resolved_extractor(self) -> Extractor:
        return self.extractor if self.extractor is not None else DefaultExtractor()


DEFAULT_CONFIG = LicenseConfig()


def home_config_path(filename: str) -> Path:
    return Path.home() / _HOME_CONFIG_DIR / filename


def _resolve_path(cli_value: str | None, env_var: str, default_filename: str) -> Path:
    if isinstance(cli_value, str) and cli_value.strip():
        return Path(cli_value.strip())
    env_path = (os.environ.get(env_var) or "").strip()
    if env_path:
        return Path(env_path)
    return home_config_path(default_filename)


def resolve_private_key_path(cli_value: str | None) -> Path:
    return _resolve_path(cli_value, PRIVATE_KEY_ENV_VAR, PRIVATE_KEY_DEFAULT_FILENAME)


def resolve_public_key_path(cli_value: str | None) -> Path:
    return _resolve_path(cli_value, PUBLIC_KEY_ENV_VAR, PUBLIC_KEY_DEFAULT_FILENAME)


def resolve_license_path(cli_value: str | None) -> Path:
    return _resolve_path(cli_value, LICENSE_ENV_VAR, LICENSE_DEFAULT_FILENAME)
