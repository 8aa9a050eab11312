"""Environment-driven settings and logging setup."""

import logging
import os
import sys
from pathlib import Path

MEMORY_PATH = os.environ.get("TELOS_MEMORY_PATH", "memory.jsonl")
TRANSPORT = os.environ.get("TELOS_TRANSPORT", "stdio")
HOST = os.environ.get("TELOS_HOST", "127.0.0.1")
PORT = int(os.environ.get("TELOS_PORT", "8099"))
LOG_LEVEL = os.environ.get("TELOS_LOG_LEVEL", "INFO").upper()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_memory_path(value=None) -> Path:
    """Absolute path for the memory file. Relative paths are taken from the cwd."""
    p = Path(value or MEMORY_PATH).expanduser()
    return p if p.is_absolute() else Path.cwd() / p


def configure_logging(level=None):
    # stderr only: stdout carries the MCP stdio transport
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
