"""
cli.py

Responsibility: CLI entrypoint for buildconf.

Commands:
- `get USER NAME`: print a build configuration as JSON
- `create USER NAME`: create a build configuration
- `push USER NAME TEMPLATE`: create a version and upload its template

This module should orchestrate behavior but keep concerns isolated:
- Settings: `config.py`
- API operations: `client.py`
- HTTP: `transport.py`
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path

from buildconf.client import BuildConfigClient
from buildconf.config import Settings, SettingsError, load_settings, parse_timeout
from buildconf.models import BuildConfigBuild, BuildConfigVersion, builds_from_template
from buildconf.transport import BuildConfigError, DecodeError, UploadError


class CLIError(RuntimeError):
    pass


def _settings_from_args(args: argparse.Namespace) -> Settings:
    settings = load_settings(args.config)
    overrides: dict[str, object] = {}
    if args.address:
        overrides["address"] = args.address
    if args.token:
        overrides["token"] = args.token
    if args.timeout is not None:
        overrides["timeout"] = parse_timeout(args.timeout, "--timeout")
    return dataclasses.replace(settings, **overrides)


def _client(args: argparse.Namespace) -> BuildConfigClient:
    return BuildConfigClient(_settings_from_args(args).transport())


def _parse_build(raw: str) -> BuildConfigBuild:
    """
    Parse `NAME:TYPE` (or just `TYPE`, naming the build after its type).
    """
    name, sep, btype = raw.partition(":")
    if not sep:
        name, btype = raw, raw
    if not name or not btype:
        raise CLIError(f"Invalid --build value {raw!r} (expected NAME:TYPE)")
    return BuildConfigBuild(name=name, type=btype)


def get_cmd(args: argparse.Namespace) -> int:
    bc = _client(args).get_build_config(args.user, args.name)
    print(json.dumps(bc.to_wire(), indent=2, sort_keys=True))
    return 0


def create_cmd(args: argparse.Namespace) -> int:
    _client(args).create_build_config(args.user, args.name)
    print(f"Created build configuration {args.user}/{args.name}")
    return 0


def push_cmd(args: argparse.Namespace) -> int:
    template_path = Path(args.template)
    if not template_path.is_file():
        raise CLIError(f"Template file does not exist: {template_path}")

    if args.builds:
        builds = [_parse_build(b) for b in args.builds]
    else:
        try:
            template = json.loads(template_path.read_text(encoding="utf-8"))
        except OSError as e:
            raise CLIError(f"Template file could not be read: {template_path} ({e})") from e
        except ValueError as e:
            raise DecodeError(f"Template is not valid JSON: {template_path}") from e
        builds = builds_from_template(template)

    version = BuildConfigVersion(user=args.user, name=args.name, builds=builds)
    client = _client(args)
    try:
        size = template_path.stat().st_size
        payload = template_path.open("rb")
    except OSError as e:
        raise CLIError(f"Template file could not be read: {template_path} ({e})") from e
    with payload:
        client.upload_build_config_version(version, payload, size)

    print(f"Uploaded version of {args.user}/{args.name} ({len(builds)} build(s), {size} bytes)")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="buildconf", description="Manage remote build configurations")
    p.add_argument("--config", default=None, help="YAML settings file")
    p.add_argument("--address", default=None, help="API address (or set env ATLAS_ADDRESS)")
    p.add_argument("--token", default=None, help="API token (or set env ATLAS_TOKEN)")
    p.add_argument("--timeout", default=None, help="Per-request timeout in seconds")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    g = sub.add_parser("get", help="Show a build configuration")
    g.add_argument("user")
    g.add_argument("name")
    g.set_defaults(func=get_cmd)

    c = sub.add_parser("create", help="Create a build configuration")
    c.add_argument("user")
    c.add_argument("name")
    c.set_defaults(func=create_cmd)

    u = sub.add_parser("push", help="Create a version and upload its template")
    u.add_argument("user")
    u.add_argument("name")
    u.add_argument("template", help="Path to the template file to upload")
    u.add_argument(
        "--build",
        dest="builds",
        action="append",
        default=[],
        help="Build as NAME:TYPE, repeatable (default: derived from the template's builders)",
    )
    u.set_defaults(func=push_cmd)
    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return int(args.func(args))
    except UploadError as e:
        print(f"error: {e}", file=sys.stderr)
        print("note: the version record was created but has no template attached", file=sys.stderr)
        return 1
    except (BuildConfigError, SettingsError, CLIError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
