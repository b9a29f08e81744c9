# intake/cli.py
"""
Command-line entry point for the lead intake gateway.

    lead-intake serve [--host HOST] [--port PORT] [--reload]
    lead-intake check-config
"""
from __future__ import annotations

import argparse
import os
import sys
from typing import Callable, Dict, Optional

from pydantic import ValidationError

from intake.core.config import LEAD_TYPES, GatewayConfig


def _supports_color() -> bool:
    if sys.platform == "win32":
        return os.getenv("TERM") == "xterm" or os.getenv("ANSICON") is not None
    return sys.stdout.isatty()


SUPPORTS_COLOR = _supports_color()

GREEN = '\033[92m' if SUPPORTS_COLOR else ''
RED = '\033[91m' if SUPPORTS_COLOR else ''
YELLOW = '\033[93m' if SUPPORTS_COLOR else ''
BLUE = '\033[94m' if SUPPORTS_COLOR else ''
RESET = '\033[0m' if SUPPORTS_COLOR else ''


def print_success(message: str):
    print(f"{GREEN}[✓]{RESET} {message}")


def print_error(message: str):
    print(f"{RED}[✗]{RESET} {message}")


def print_warning(message: str):
    print(f"{YELLOW}[!]{RESET} {message}")


def print_info(message: str):
    print(f"{BLUE}[i]{RESET} {message}")


def _load_config() -> Optional[GatewayConfig]:
    try:
        return GatewayConfig()
    except ValidationError as e:
        print_error("Configuration is invalid:")
        for issue in e.errors():
            field = ".".join(str(part) for part in issue.get("loc", ()))
            print_error(f"  {field}: {issue.get('msg')}")
        return None


def cmd_serve(args: argparse.Namespace) -> int:
    """Command: Run the HTTP server."""
    import uvicorn

    config = _load_config()
    if config is None:
        return 1

    host = args.host or config.api_host
    port = args.port or config.api_port
    print_info(f"Serving on http://{host}:{port}{config.api_prefix} ({config.environment})")
    uvicorn.run("intake.main:app", host=host, port=port, reload=args.reload)
    return 0


def cmd_check_config(args: argparse.Namespace) -> int:
    """Command: Report which settings resolve. Secrets are never printed."""
    config = _load_config()
    if config is None:
        return 1

    problems = 0
    print_info(f"Environment: {config.environment}")

    if config.turnstile_secret_key:
        print_success("Turnstile secret configured")
    else:
        print_error("Turnstile secret missing (TURNSTILE_SECRET_KEY)")
        problems += 1

    origins = config.origins()
    if origins:
        print_success(f"Allowed origins: {', '.join(origins)}")
    else:
        print_warning("ALLOWED_ORIGIN is empty; every origin is accepted")

    for lead_type in LEAD_TYPES:
        target = config.resolve_forward_target(lead_type)
        if target:
            print_success(f"{lead_type}: {target.masked()}")
        else:
            settings = ", ".join(config.forward_settings_for(lead_type))
            print_error(f"{lead_type}: no upstream target (set {settings})")
            problems += 1

    legacy = config.resolve_forward_target("feedback", use_shared=False)
    if legacy:
        print_success(f"feedback (legacy endpoint): {legacy.masked()}")
    else:
        print_warning("feedback (legacy endpoint): no upstream target (set FEEDBACK_ENDPOINT_URL, FEEDBACK_FORWARD_SECRET)")

    if problems:
        print_error(f"{problems} problem(s) found")
        return 1
    print_success("Configuration complete")
    return 0


COMMANDS: Dict[str, Callable[[argparse.Namespace], int]] = {
    'serve': cmd_serve,
    'check-config': cmd_check_config,
}


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='lead-intake',
        description='Lead intake gateway',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    serve_parser = subparsers.add_parser('serve', help='Run the HTTP server')
    serve_parser.add_argument('--host', default=None, help='Bind address (default: API_HOST)')
    serve_parser.add_argument('--port', type=int, default=None, help='Bind port (default: API_PORT)')
    serve_parser.add_argument('--reload', action='store_true', help='Reload on code changes')

    subparsers.add_parser('check-config', help='Show which settings resolve')

    return parser


def main(args: Optional[list] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    command_func = COMMANDS[parsed_args.command]
    try:
        return command_func(parsed_args)
    except KeyboardInterrupt:
        print_error("\nInterrupted by user")
        return 130


if __name__ == '__main__':
    sys.exit(main())
