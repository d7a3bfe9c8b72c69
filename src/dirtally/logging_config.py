# Licensed under the Apache License, Version 2.0
import logging
import os

def setup_logging() -> None:
    # WARNING by default: stdout carries the totals, diagnostics go to stderr.
    level_name = os.getenv("DIRTALLY_LOG_LEVEL", "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    logging.basicConfig(level=level, format=fmt)
