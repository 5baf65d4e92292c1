"""CLI interface for pii-shield.

Usage:
    # Detect entities (stdin: text, stdout: JSON entity records + stats)
    echo 'Contact John Smith at john@x.com' | python -m pii_shield.cli detect

    # Redact text (stdin: text, stdout: JSON result)
    echo 'Contact John Smith at john@x.com' | \\
        python -m pii_shield.cli --strategy "Contextual Masking" redact

    # Print only the redacted text
    python -m pii_shield.cli redact --text-only < notes.txt

    # List redaction strategies
    python -m pii_shield.cli strategies
"""

from __future__ import annotations
import argparse
import json
import logging
import sys

from .config import apply_env_overrides, load_config, load_from_yaml
from .exceptions import PIIShieldError
from .redactor import Redactor, RedactorConfig
from .stats import compute_stats
from .strategies import LABELS
from .types import EntityType


def _build_config(args: argparse.Namespace) -> RedactorConfig:
    config = load_from_yaml(args.config) if args.config else load_config({})
    config = apply_env_overrides(config)
    if args.no_presidio:
        config.use_presidio = False
    if args.language:
        config.language = args.language
    if args.threshold is not None:
        config.score_threshold = args.threshold
    if args.strategy:
        config.strategy = args.strategy
    if args.skip_types:
        config.skip_types = {EntityType(t.strip().upper()) for t in args.skip_types.split(",")}
    if args.allow_list:
        config.allow_list = set(args.allow_list.split(","))
    return config


def cmd_detect(args: argparse.Namespace) -> None:
    """Detect PII in plain text on stdin."""
    with Redactor(_build_config(args)) as redactor:
        entities = redactor.detect(sys.stdin.read())

    output = {
        "entities": [e.to_record() for e in entities],
        "stats": compute_stats(entities).to_dict(),
    }
    json.dump(output, sys.stdout, ensure_ascii=False)
    sys.stdout.write("\n")


def cmd_redact(args: argparse.Namespace) -> None:
    """Redact PII from plain text on stdin."""
    with Redactor(_build_config(args)) as redactor:
        result = redactor.redact(sys.stdin.read())

    if args.text_only:
        sys.stdout.write(result.redacted_text)
        return
    json.dump(result.to_dict(), sys.stdout, ensure_ascii=False)
    sys.stdout.write("\n")


def cmd_strategies(args: argparse.Namespace) -> None:
    """List supported redaction strategies."""
    json.dump(LABELS, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pii_shield",
        description="PII detection and redaction for extracted document text",
    )
    parser.add_argument("--config", help="YAML config file")
    parser.add_argument("--no-presidio", action="store_true", help="Regex-only mode")
    parser.add_argument("--language", help="Language code")
    parser.add_argument("--threshold", type=float, help="NER score threshold")
    parser.add_argument("--strategy", help="Redaction strategy id or label")
    parser.add_argument("--skip-types", default="", help="Comma-separated entity types to skip")
    parser.add_argument("--allow-list", default="", help="Comma-separated values to never redact")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging to stderr")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("detect", help="Detect entities in text (stdin)")
    redact = sub.add_parser("redact", help="Redact text (stdin)")
    redact.add_argument("--text-only", action="store_true", help="Print only redacted text")
    sub.add_parser("strategies", help="List redaction strategies")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cmds = {
        "detect": cmd_detect,
        "redact": cmd_redact,
        "strategies": cmd_strategies,
    }
    try:
        cmds[args.command](args)
    except (PIIShieldError, ValueError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
