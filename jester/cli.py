"""
Jester — Entry Point
Stream test-driven code fixes from a local Ollama server.
"""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional

from jester import __version__
from jester.config.settings import (
    JesterSettings,
    default_config_path,
    load_settings,
    validate_setting,
)
from jester.core.errors import JesterError, NoCodeBlockError, TransportError
from jester.core.fix_session import GENERATION_ERROR_NOTICE, FixSession
from jester.core.ollama_client import OllamaClient
from jester.services.config_service import ConfigService
from jester.ui.colors import (
    ACCENT_ALT_FG,
    ACCENT_FG,
    BOLD,
    ERROR_FG,
    MUTED_FG,
    SUCCESS_FG,
    WARNING_FG,
    colorize,
)

logger = logging.getLogger(__name__)


def _status(message: str, color: str) -> None:
    print(colorize(message, color, stream=sys.stderr), file=sys.stderr)


def _error(message: str) -> None:
    _status(f"✗ {message}", ERROR_FG)


def _read_input(path: Optional[str]) -> str:
    """Read a text input; '-' reads stdin and None means empty."""
    if path is None:
        return ""
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _resolve_settings(args) -> JesterSettings:
    return load_settings(
        config_path=Path(args.config) if args.config else None,
        endpoint=args.endpoint,
        model=getattr(args, "model", None),
        auto_apply=True if getattr(args, "auto_apply", False) else None,
        apply_delay=getattr(args, "apply_delay", None),
        timeout=args.timeout,
    )


# =====================================================================
#  SUBCOMMAND HANDLERS
# =====================================================================

def cmd_doctor(args) -> int:
    """Check that the Ollama server answers and has models installed."""
    settings = _resolve_settings(args)
    client = OllamaClient(settings.endpoint, timeout=settings.timeout)

    print(colorize("🔍 Jester Doctor - Ollama Health Check", ACCENT_FG, BOLD))
    print("=" * 60)
    print(f"Endpoint: {client.endpoint}")

    if not client.check_connection():
        _error(f"Cannot reach Ollama at {client.endpoint}. Is the Ollama daemon running?")
        return 1
    print(colorize("✓ Connected", SUCCESS_FG))

    models = client.fetch_models()
    if not models:
        print(colorize("○ No models installed. Try: ollama pull <model>", WARNING_FG))
        return 1
    print(colorize(f"✓ {len(models)} model(s) available", SUCCESS_FG))

    if settings.model and settings.model not in {m.name for m in models}:
        print(colorize(f"○ Configured model '{settings.model}' is not installed", WARNING_FG))
        return 1
    return 0


def cmd_models(args) -> int:
    """List models installed on the Ollama server."""
    settings = _resolve_settings(args)
    client = OllamaClient(settings.endpoint, timeout=settings.timeout)

    if not client.check_connection():
        _error(f"Cannot reach Ollama at {client.endpoint}.")
        return 1

    models = client.fetch_models()
    if not models:
        print(colorize("No models found.", MUTED_FG))
        return 0

    for model in models:
        details = model.details
        meta = " ".join(p for p in (details.parameter_size, details.quantization_level) if p)
        marker = "*" if model.name == settings.model else " "
        print(f"{marker} {colorize(model.name, ACCENT_ALT_FG)}  {colorize(meta, MUTED_FG)}")
    return 0


def cmd_fix(args) -> int:
    """Stream a fix for SOURCE and optionally apply it."""
    try:
        settings = _resolve_settings(args)
        source = _read_input(args.source)
        tests = _read_input(args.tests)
        error_log = _read_input(args.errors)
    except (OSError, ValueError) as e:
        _error(str(e))
        return 1

    session = FixSession(
        endpoint=settings.endpoint,
        model=settings.model,
        source=source,
        tests=tests,
        error_log=error_log,
        auto_apply=settings.auto_apply,
        apply_delay=settings.apply_delay,
        timeout=settings.timeout,
    )

    session.connect()
    if not session.connected:
        _error(f"Cannot reach Ollama at {session.client.endpoint}. Is the Ollama daemon running?")
        return 1

    _status(f"⚡ Fixing with {session.model or '?'}...", ACCENT_FG)

    def _echo(fragment: str) -> None:
        sys.stdout.write(fragment)
        sys.stdout.flush()

    original_source = session.source
    try:
        session.run_fix(on_fragment=_echo)
    except TransportError as e:
        # Partial output is already on screen; add the notice after it
        print(colorize(GENERATION_ERROR_NOTICE, ERROR_FG))
        _error(str(e))
        return 1
    except JesterError as e:
        _error(str(e))
        return 1
    print()

    if args.apply:
        try:
            session.apply_fix(interactive=True)
        except NoCodeBlockError as e:
            _status(str(e), WARNING_FG)
            return 2
    elif not session.auto_apply:
        return 0

    if session.source == original_source:
        _status("○ Source unchanged", MUTED_FG)
        return 0

    _status("✓ Fix applied", SUCCESS_FG)
    if args.write:
        Path(args.source).write_text(session.source, encoding="utf-8")
        _status(f"✓ Wrote {args.source}", SUCCESS_FG)
    elif args.print_source:
        print(session.source)
    return 0


def _parse_config_value(raw: str) -> Any:
    """JSON literals (true, 0.5, "x") parse as JSON; anything else is a string."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def cmd_config(args) -> int:
    """Show, read or update the Jester config file."""
    service = ConfigService(config_path=Path(args.config) if args.config else default_config_path())
    if service.exists():
        service.load()

    if args.config_action == "set":
        value = _parse_config_value(args.value)
        try:
            validate_setting(args.key, value)
        except TypeError as e:
            _error(str(e))
            return 1
        service.set(args.key, value)
        service.save()
        _status(f"✓ {args.key} = {json.dumps(value)} ({service.config_path})", SUCCESS_FG)
        return 0

    if args.config_action == "get":
        value = service.get(args.key)
        if value is None:
            _error(f"{args.key} is not set in {service.config_path}")
            return 1
        print(json.dumps(value))
        return 0

    # show: effective settings after file and defaults
    settings = _resolve_settings(args)
    print(json.dumps(asdict(settings), indent=4))
    return 0


# =====================================================================
#  CLI ENTRY WITH SUBCOMMANDS
# =====================================================================

def _create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="jester",
        description="Jester — fix failing code with a local Ollama model",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  jester doctor                                  # Check Ollama connection
  jester models                                  # List installed models
  jester config set model qwen2.5-coder:14b      # Choose a default model
  jester fix src/math.js -t math.test.js -e fail.log --apply --write
  npm test 2>&1 | jester fix src/math.js -t math.test.js -e - --auto-apply
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"jester {__version__}"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to config.json (default: ~/.jester/config.json)"
    )
    parser.add_argument(
        "--endpoint",
        type=str,
        help="Ollama endpoint URL, overriding config"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="HTTP timeout in seconds"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands"
    )

    subparsers.add_parser(
        "doctor",
        help="Check Ollama connection and installed models"
    )

    subparsers.add_parser(
        "models",
        help="List models installed on the Ollama server"
    )

    parser_fix = subparsers.add_parser(
        "fix",
        help="Stream a fix for a source file"
    )
    parser_fix.add_argument(
        "source",
        help="Source file to fix"
    )
    parser_fix.add_argument(
        "--tests", "-t",
        help="Test suite file"
    )
    parser_fix.add_argument(
        "--errors", "-e",
        help="Test runner output ('-' reads stdin)"
    )
    parser_fix.add_argument(
        "--model", "-m",
        type=str,
        help="Model to use, overriding config"
    )
    apply_group = parser_fix.add_mutually_exclusive_group()
    apply_group.add_argument(
        "--apply",
        action="store_true",
        help="Apply the last code block, reporting when none is found"
    )
    apply_group.add_argument(
        "--auto-apply",
        action="store_true",
        help="Apply the last code block silently when the stream completes"
    )
    parser_fix.add_argument(
        "--apply-delay",
        type=float,
        help="Seconds to wait before auto-apply"
    )
    output_group = parser_fix.add_mutually_exclusive_group()
    output_group.add_argument(
        "--write", "-w",
        action="store_true",
        help="Write the fixed source back to SOURCE"
    )
    output_group.add_argument(
        "--print-source",
        action="store_true",
        help="Print the fixed source after the response"
    )

    parser_config = subparsers.add_parser(
        "config",
        help="Show or edit the config file"
    )
    config_actions = parser_config.add_subparsers(dest="config_action")
    config_actions.add_parser(
        "show",
        help="Print the effective settings (default)"
    )
    parser_get = config_actions.add_parser(
        "get",
        help="Print one value from the config file"
    )
    parser_get.add_argument("key")
    parser_set = config_actions.add_parser(
        "set",
        help="Store a value in the config file"
    )
    parser_set.add_argument("key")
    parser_set.add_argument("value", help="JSON literal or plain string")

    return parser


def main(argv=None):
    """Main entry point with subcommand routing."""
    parser = _create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        )
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    try:
        if args.command == "doctor":
            return cmd_doctor(args)
        elif args.command == "models":
            return cmd_models(args)
        elif args.command == "fix":
            return cmd_fix(args)
        elif args.command == "config":
            return cmd_config(args)
    except ValueError as e:
        # Broken config file
        _error(str(e))
        return 1

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
