"""CLI entrypoint for SyncAI."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from importlib import metadata
from pathlib import Path

from .app import SyncAIChatApp
from .config import ensure_config_dir


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="syncai",
        description="SyncAI - Terminal chat interface for hosted Gemini models",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )
    parser.add_argument(
        "--model",
        default=None,
        help="Override the configured model identifier",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to an alternative config.toml",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Ensure configuration exists, handle CLI flags, and run the TUI."""

    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.version:
        try:
            version = metadata.version("syncai-chat")
        except metadata.PackageNotFoundError:
            version = "0.0.0"
        print(f"syncai {version}")
        return

    if args.config is None:
        ensure_config_dir()
    app = SyncAIChatApp(config_path=args.config, model_override=args.model)
    app.run()


if __name__ == "__main__":
    main()
