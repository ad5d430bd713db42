"""Entry point for ``python -m vibe_architect``."""

from __future__ import annotations

from vibe_architect.cli import app
from vibe_architect.logging_utils import configure_stream_logging

if __name__ == "__main__":
    configure_stream_logging()
    app()
