"""Bookie CLI entry point."""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

load_dotenv()

from bookie import __version__
from bookie.config import get_settings
from bookie.exceptions import ConfigError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)

CONFIG_TEMPLATE = """# Bookie Configuration
# Operational parameters for the wager ledger.
# Secrets (LOGFIRE_TOKEN) belong in .env, not here.

ledger:
  allow_self_accept: true

settlement:
  # acceptor: pushes follow the strict comparisons
  # void: pushes settle with no winner
  push_policy: acceptor

server:
  host: 127.0.0.1
  port: 8000
  allowed_origins:
    - http://localhost:3000
"""


def cmd_init(args: argparse.Namespace) -> int:
    """Initialize data directory and configuration file."""
    data_dir = Path(args.data_dir).resolve()

    try:
        data_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Created data directory: {data_dir}")

        config_path = data_dir / "config.yaml"
        if not config_path.exists():
            config_path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
            logger.info(f"Created config template: {config_path}")
        else:
            logger.info(f"Config file already exists: {config_path}")

        print(f"\n✓ Data directory initialized at {data_dir}")
        print("\nNext steps:")
        print("1. Review and customize config.yaml if needed")
        print("2. Run 'python -m bookie config' to verify configuration")
        print("3. Run 'python -m bookie serve' to start the API\n")
        return 0

    except OSError as e:
        logger.error(f"Failed to initialize: {e}")
        print(f"\n❌ Initialization failed: {e}\n")
        return 1


def cmd_config(args: argparse.Namespace) -> int:
    """Display merged configuration."""
    try:
        settings = get_settings()
    except ValidationError as e:
        print("\n❌ Configuration Error:\n")
        for error in e.errors():
            print(f"  • {'.'.join(str(x) for x in error['loc'])}: {error['msg']}")
        print()
        return 1
    except ConfigError as e:
        print(f"\n❌ Failed to load configuration: {e}\n")
        return 1

    print("\n=== Bookie Configuration ===\n")
    print(f"Data Directory: {settings.data_dir}")
    print(f"Log Level: {settings.log_level}\n")

    print("Ledger:")
    print(f"  Allow Self Accept: {settings.ledger.allow_self_accept}\n")

    print("Settlement:")
    print(f"  Push Policy: {settings.settlement.push_policy}\n")

    print("Server:")
    print(f"  Address: {settings.server.host}:{settings.server.port}")
    print(f"  Allowed Origins: {', '.join(settings.server.allowed_origins)}\n")

    print("API Keys:")
    print(f"  Logfire: {'✓ Set' if settings.logfire_token else '✗ Not set'}\n")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    from bookie.api import create_app

    try:
        settings = get_settings()
        logging.getLogger().setLevel(
            logging.DEBUG if args.debug else settings.log_level
        )
        host = args.host or settings.server.host
        port = args.port or settings.server.port

        print("\n=== Bookie API ===\n")
        print(f"Version: {__version__}")
        print(f"Listening on http://{host}:{port}")
        print(f"Push Policy: {settings.settlement.push_policy}\n")

        uvicorn.run(create_app(settings), host=host, port=port)
        return 0

    except KeyboardInterrupt:
        print("\n\nReceived interrupt signal. Shutting down...\n")
        return 0
    except (ConfigError, ValidationError) as e:
        logger.error(f"Failed to start server: {e}")
        print(f"\nFailed to start: {e}\n")
        return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Bookie: peer-to-peer sports wager ledger",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Bookie {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parser_init = subparsers.add_parser(
        "init",
        help="Initialize data directory and configuration file",
    )
    parser_init.add_argument(
        "--data-dir",
        default="data",
        help="Directory to create (default: ./data)",
    )
    parser_init.set_defaults(func=cmd_init)

    parser_config = subparsers.add_parser(
        "config",
        help="Display merged configuration",
    )
    parser_config.set_defaults(func=cmd_config)

    parser_serve = subparsers.add_parser(
        "serve",
        help="Start the HTTP API",
    )
    parser_serve.add_argument("--host", help="Bind address (default from config)")
    parser_serve.add_argument("--port", type=int, help="Port (default from config)")
    parser_serve.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser_serve.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
