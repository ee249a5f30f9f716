"""License artifact rendering from ``{{placeholder}}`` templates."""

from __future__ import annotations

import logging
import re
from importlib import resources

from licensefile.canonical import LicenseData, normalize_license_data
from licensefile.errors import InputError, TemplateError

log = logging.getLogger(__name__)

SERIAL_FIELD = "serial"
STRING_FIELD = "string"

# {{name}}, {{&name}} and {{{name}}} all substitute the raw value.
_PLACEHOLDER_RE = re.compile(
    r"\{\{\{\s*(?P<triple>[^{}\s]+)\s*\}\}\}|\{\{\s*&?\s*(?P<name>[^{}&\s]+)\s*\}\}"
)


def _load_default_template() -> str:
    return (
        resources.files("licensefile.templates")
        .joinpath("default.tpl")
        .read_text(encoding="utf-8")
    )


DEFAULT_TEMPLATE = _load_default_template()


def template_fields(template: str) -> list[str]:
    """Placeholder names in order of first appearance."""
    names: list[str] = []
    for match in _PLACEHOLDER_RE.finditer(template):
        name = match.group("triple") or match.group("name")
        if name not in names:
            names.append(name)
    return names


def render_fields(data: object, serial: str) -> dict[str, str]:
    """Fields bound during rendering: the data plus the injected serial."""
    normalized = normalize_license_data(data)
    if isinstance(normalized, str):
        fields = {STRING_FIELD: normalized}
    else:
        fields = normalized.as_dict()
    fields[SERIAL_FIELD] = serial
    return fields


def render(template: str, data: LicenseData, serial: str, *, strict: bool = False) -> str:
    if not isinstance(template, str):
        raise InputError("template must be a string")
    fields = render_fields(data, serial)

    missing = [name for name in template_fields(template) if name not in fields]
    if missing:
        if strict:
            raise TemplateError(f"template references unknown fields: {', '.join(missing)}")
        log.debug("unresolved template fields rendered empty: %s", ", ".join(missing))

    def _substitute(match: re.Match[str]) -> str:
        name = match.group("triple") or match.group("name")
        return fields.get(name, "")

    return _PLACEHOLDER_RE.sub(_substitute, template)
