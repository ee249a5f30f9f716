"""Command-line interface for licensefile."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from licensefile import __version__ as LF_VERSION
from licensefile.audit import LicenseEventLog
from licensefile.config import (
    LicenseConfig,
    resolve_license_path,
    resolve_private_key_path,
    resolve_public_key_path,
)
from licensefile.core import issue_license, validate_license
from licensefile.errors import InputError, LicenseFileError
from licensefile.extract import DefaultExtractor, Extractor, LineExtractor

VALIDATE_SCHEMA_VERSION = "license_validate.v0"
_VALIDATE_LATEST_FILENAME = "license_validate_latest.json"

_EXIT_OK = 0
_EXIT_ERROR = 1
_EXIT_INVALID = 2


def _emit_error(message: str) -> int:
    print(f"ERROR: {message}", file=sys.stderr)
    return _EXIT_ERROR


def _event_log(path: str | None) -> LicenseEventLog | None:
    return LicenseEventLog(Path(path)) if path else None


def _parse_field(value: str) -> tuple[str, str]:
    name, sep, field_value = value.partition("=")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"invalid field: '{value}' (use NAME=VALUE)")
    return name.strip(), field_value


def _parse_field_names(value: str) -> list[str]:
    names = [item.strip() for item in value.split(",") if item.strip()]
    if not names:
        raise argparse.ArgumentTypeError(f"invalid field list: '{value}' (use e.g. name,email)")
    return names


def _load_data_json(path: Path) -> dict[str, str]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise InputError(f"data file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise InputError(f"invalid JSON in {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise InputError(f"data file is not UTF-8: {path}") from exc
    except (OSError, ValueError) as exc:
        raise InputError(f"data file unreadable: {path}") from exc
    if not isinstance(payload, dict):
        raise InputError(f"{path}: top-level JSON must be an object")
    return payload


def _issue_data(args: argparse.Namespace) -> object:
    if args.data is not None:
        return args.data
    if args.field:
        return dict(args.field)
    return _load_data_json(Path(args.data_json))


def _read_text(path: Path, *, what: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise InputError(f"{what} is not UTF-8: {path}") from exc
    except (OSError, ValueError) as exc:
        raise InputError(f"{what} unreadable: {path}") from exc


def _read_license(path: Path) -> str:
    # No newline translation: the artifact is parsed exactly as issued.
    try:
        with path.open("r", encoding="utf-8", newline="") as f:
            return f.read()
    except UnicodeDecodeError as exc:
        raise InputError(f"license file is not UTF-8: {path}") from exc
    except (OSError, ValueError) as exc:
        raise InputError(f"license file unreadable: {path}") from exc


def cmd_issue(args: argparse.Namespace) -> int:
    events = _event_log(args.events)
    key_path = resolve_private_key_path(args.private_key)
    try:
        data = _issue_data(args)
        template = _read_text(Path(args.template), what="template") if args.template else None
        config = LicenseConfig(template=template, strict_template=bool(args.strict_template))
        artifact = issue_license(data, key_path, config=config)
    except LicenseFileError as exc:
        if events is not None:
            events.issue_failed(exc)
        return _emit_error(str(exc))

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(artifact, encoding="utf-8", newline="")
    else:
        sys.stdout.write(artifact)
        sys.stdout.flush()
    if events is not None:
        events.issued(data, out=args.out, template=args.template)
    return _EXIT_OK


def _validate_extractor(args: argparse.Namespace) -> Extractor:
    if not args.fields:
        return DefaultExtractor()
    return LineExtractor(
        args.fields,
        header_lines=args.header_lines,
        footer_lines=args.footer_lines,
    )


def cmd_validate(args: argparse.Namespace) -> int:
    events = _event_log(args.events)
    license_path = resolve_license_path(args.license)
    key_path = resolve_public_key_path(args.public_key)
    try:
        artifact = _read_license(license_path)
        result = validate_license(artifact, key_path, extractor=_validate_extractor(args))
    except LicenseFileError as exc:
        if events is not None:
            events.validate_failed(exc, license_path=license_path)
        return _emit_error(str(exc))

    report = {
        "schema_version": VALIDATE_SCHEMA_VERSION,
        "license_path": str(license_path),
        **result.to_dict(),
    }
    rendered = json.dumps(report, indent=2, ensure_ascii=False) + "\n"
    if args.out:
        out_dir = Path(args.out)
        out_dir.mkdir(parents=True, exist_ok=True)
        (out_dir / _VALIDATE_LATEST_FILENAME).write_text(rendered, encoding="utf-8")
    sys.stdout.write(rendered)
    if events is not None:
        events.validated(result, license_path=license_path)
    return _EXIT_OK if result.valid else _EXIT_INVALID


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="licensefile")
    parser.add_argument("--version", action="version", version=f"licensefile {LF_VERSION}")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log to stderr (-v info, -vv debug)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    issue = sub.add_parser(
        "issue",
        help="Sign license data and render a license file",
        description=(
            "Sign license data and render a license file. Private key: --private-key, "
            "else LICENSEFILE_PRIVATE_KEY_PATH, else ${HOME}/.config/licensefile/private_key.pem."
        ),
    )
    source = issue.add_mutually_exclusive_group(required=True)
    source.add_argument("--data", help="License data string")
    source.add_argument(
        "--field",
        action="append",
        type=_parse_field,
        metavar="NAME=VALUE",
        help="License data field (repeatable, order is kept and signed)",
    )
    source.add_argument("--data-json", help="Path to a JSON object of string fields")
    issue.add_argument("--private-key", help="Path to PEM/DER private key")
    issue.add_argument("--template", help="Path to license template (default: built-in 4-line layout)")
    issue.add_argument(
        "--strict-template",
        action="store_true",
        help="Fail when the template references fields the data does not have",
    )
    issue.add_argument("--out", help="Write license file here (default: stdout)")
    issue.add_argument("--events", help="Append JSONL events to this path")
    issue.set_defaults(func=cmd_issue)

    validate = sub.add_parser(
        "validate",
        help="Check the signature of a license file",
        description=(
            "Check the signature of a license file. Defaults: --license "
            "LICENSEFILE_LICENSE_PATH, else ${HOME}/.config/licensefile/license.lic; "
            "--public-key LICENSEFILE_PUBLIC_KEY_PATH, else "
            "${HOME}/.config/licensefile/public_key.pem."
        ),
    )
    validate.add_argument("--license", help="Path to license file")
    validate.add_argument("--public-key", help="Path to PEM/DER public key or certificate")
    validate.add_argument(
        "--fields",
        type=_parse_field_names,
        help="Comma-separated field names, one per line, for custom-template licenses",
    )
    validate.add_argument("--header-lines", type=int, default=1, help="Marker lines before fields")
    validate.add_argument("--footer-lines", type=int, default=1, help="Marker lines after serial")
    validate.add_argument("--out", help="Also write license_validate_latest.json to this directory")
    validate.add_argument("--events", help="Append JSONL events to this path")
    validate.set_defaults(func=cmd_validate)

    return parser


def _configure_logging(verbose: int) -> None:
    if verbose <= 0:
        return
    logging.basicConfig(
        level=logging.DEBUG if verbose > 1 else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
