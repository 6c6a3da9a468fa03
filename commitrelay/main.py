"""commitrelay entry point.

Runs the webhook server. Usage: commitrelay [--config PATH] [--check].
"""

import argparse
import logging
import sys
from pathlib import Path

from commitrelay.config import ConfigError, load_config, resolve_settings
from commitrelay.logging import setup_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        prog="commitrelay",
        description="commitrelay - GitHub webhook to downstream commit relay",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only load and validate config, then exit",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entry point: validate config or run the webhook server."""
    args = parse_args(argv)

    config_path = args.config
    if not config_path.is_file() and config_path == Path("config.yaml"):
        if Path("config.example.yaml").is_file():
            config_path = Path("config.example.yaml")
            logging.basicConfig(level=logging.INFO)
            logging.getLogger("commitrelay").warning("config.yaml not found, using config.example.yaml")

    config = load_config(config_path)

    if args.check:
        try:
            settings = resolve_settings(config)
        except ConfigError as e:
            print(f"Config error: {e}")
            return 1
        print("Config OK:", f"{settings.owner}/{settings.repo}", "->", settings.downstream_url)
        return 0

    setup_logging(config.logging)

    from commitrelay.webhook.server import run_webhook_server

    try:
        run_webhook_server(config)
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        logging.getLogger("commitrelay").exception("Fatal error: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
