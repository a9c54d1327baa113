# Flagtree CLI Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Runs a Flagtree app described by a config file.

`flagtree` (or `python -m flagtree`) looks for a `flagtree.yaml` / `flagtree.toml`
schema, builds the app from it, parses the command line and runs the selected
command's action. The config file's directory is put on `sys.path` so actions
can live next to it.
"""
import asyncio
import os
import sys
from pathlib import Path
from typing import Any

from flagtree.config import loader
from flagtree.console import write_stderr
from flagtree.exceptions import FlagtreeError
from flagtree.utils import setup_logging


def find_flagtree_config() -> Path | None:
    candidates = [
        Path.cwd() / "flagtree.yaml",
        Path.cwd() / "flagtree.toml",
        Path.cwd() / ".flagtree.yaml",
        Path.cwd() / ".flagtree.toml",
        Path(os.environ.get("FLAGTREE_CONFIG", "flagtree.yaml")),
        Path.home() / ".config" / "flagtree" / "flagtree.yaml",
        Path.home() / ".config" / "flagtree" / "flagtree.toml",
    ]
    return next((p for p in candidates if p.is_file()), None)


def bootstrap() -> Path | None:
    config_path = find_flagtree_config()
    if config_path and str(config_path.parent) not in sys.path:
        sys.path.insert(0, str(config_path.parent))
    return config_path


async def run(config_path: Path, argv: list[str]) -> None:
    app = loader(config_path)
    results = await app.parse([app.name, *argv])
    await results.run()


def main() -> Any:
    setup_logging()
    config_path = bootstrap()
    if not config_path:
        write_stderr(
            "No flagtree.yaml or flagtree.toml found. Create one in the current "
            "directory or point FLAGTREE_CONFIG at it."
        )
        return 1
    try:
        return asyncio.run(run(config_path, sys.argv[1:]))
    except (FlagtreeError, FileNotFoundError) as error:
        write_stderr(f"ERROR: {error}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
