"""Command line interface for canonicalizing and inspecting event payloads."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

import yaml

from .coding_key import format_path
from .config import ConfigLoadError, CodecOptions, load_codec_options
from .decoder import decode, decode_obj
from .encoder import encode_text
from .envelope import EnvelopeError, SelfDescribingJson
from .errors import CodecError
from .value import Array, Object, Value, kind_name, walk
from .verify import format_report, verify_round_trip

_YAML_SUFFIXES = {".yaml", ".yml"}


class CLIError(RuntimeError):
    """Raised when CLI execution fails."""


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser."""
    parser = argparse.ArgumentParser(
        prog="tracker-json",
        description="Canonicalize, inspect and wrap JSON event payloads",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    canonicalize = commands.add_parser(
        "canonicalize", help="Print the canonical JSON encoding of a payload file"
    )
    _add_input_arguments(canonicalize)
    canonicalize.add_argument(
        "--verify",
        action="store_true",
        help="Check that the canonical encoding decodes back to an equal tree",
    )

    inspect = commands.add_parser("inspect", help="Print every node with its path and kind")
    _add_input_arguments(inspect)

    envelope = commands.add_parser(
        "envelope", help="Wrap a payload file in a self-describing envelope"
    )
    _add_input_arguments(envelope)
    envelope.add_argument("--schema", required=True, help="Iglu URI of the payload schema")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Run CLI and return process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level))

    try:
        options = _load_options(args.config)
        value = read_payload(Path(args.input), options=options)
        if args.command == "canonicalize":
            print(encode_text(value, options=options))
            if args.verify:
                report = verify_round_trip(value, options=options)
                print(format_report(report))
                if not report.ok:
                    return 1
        elif args.command == "inspect":
            for line in render_tree(value):
                print(line)
        else:
            envelope = SelfDescribingJson(schema=args.schema, data=value)
            print(encode_text(envelope.to_value(), options=options))
    except (CodecError, ConfigLoadError, EnvelopeError, CLIError) as exc:
        parser.error(str(exc))
        return 2

    return 0


def read_payload(path: Path, *, options: CodecOptions) -> Value:
    """Decode a JSON or YAML payload file.

    Args:
        path (Path): Payload file. ``.yaml``/``.yml`` files are read as YAML,
            anything else as JSON.
        options (CodecOptions): Codec options for decoding.

    Returns:
        Value: The decoded payload.
    """
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise CLIError(f"Failed to read payload file {path}: {exc}") from exc

    if path.suffix.lower() not in _YAML_SUFFIXES:
        return decode(raw, options=options)
    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise CLIError(f"Failed to parse YAML in {path}: {exc}") from exc
    return decode_obj(parsed, options=options)


def render_tree(value: Value) -> list[str]:
    """Render one ``<path>: <Kind> <detail>`` line per node."""
    lines: list[str] = []
    for path, node in walk(value):
        if isinstance(node, Array):
            detail = f"({len(node)} items)"
        elif isinstance(node, Object):
            detail = f"({len(node)} members)"
        else:
            detail = encode_text(node)
        lines.append(f"{format_path(path)}: {kind_name(node)} {detail}")
    return lines


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--input", required=True, help="Path to a JSON or YAML payload file")
    parser.add_argument("--config", help="Path to a YAML file with codec options")


def _load_options(config: Optional[str]) -> CodecOptions:
    if config is None:
        return CodecOptions()
    return load_codec_options(Path(config))


if __name__ == "__main__":
    raise SystemExit(main())
