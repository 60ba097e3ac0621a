"""Logging setup shared by scripts and long-running jobs."""

import logging
import sys

from paceflow.config import settings


def setup_logging(level: str | None = None) -> None:
    """Configure root logging once per process."""
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )
