"""CLI entrypoint for editchat."""

from __future__ import annotations

import argparse
import asyncio
from collections.abc import Sequence
from importlib import metadata
from pathlib import Path
import sys

from .app import ChatApp
from .config import ensure_config_dir, load_config
from .exceptions import ConfigValidationError
from .logging_utils import configure_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="editchat",
        description="editchat - terminal chat with editable history for Ollama models",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a config.toml to use instead of the default location",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Load configuration, set up logging, and run the chat loop."""

    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.version:
        try:
            version = metadata.version("editchat")
        except metadata.PackageNotFoundError:
            version = "0.0.0"
        print(f"editchat {version}")
        return

    ensure_config_dir()
    try:
        config = load_config(config_path=args.config, strict=args.config is not None)
    except ConfigValidationError as exc:
        parser.exit(2, f"editchat: {exc}\n")
    configure_logging(config["logging"])
    app = ChatApp(config=config)
    sys.exit(asyncio.run(app.run()))


if __name__ == "__main__":
    main()
