"""
Logging utilities for GeneScreen.
Sets up logging to stderr and, optionally, a log file.
stdout is reserved for the report itself.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

def setup_logging(log_file: Optional[Path] = None, quiet: bool = False, debug: bool = False) -> logging.Logger:
    """
    Setup logging to stderr (INFO, or WARNING when quiet, DEBUG when debug)
    and to log_file (DEBUG) if given.

    :param log_file: Optional path to a log file.
    :param quiet: Only show warnings and errors on the console.
    :param debug: Show debug messages on the console.
    :return: The configured root logger.
    """
    formatter = logging.Formatter(FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    if debug:
        console_handler.setLevel(logging.DEBUG)
    elif quiet:
        console_handler.setLevel(logging.WARNING)
    else:
        console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    # Remove existing handlers
    for h in root.handlers[:]:
        root.removeHandler(h)
    root.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
        root.debug(f"Logging initialized. Log file: {log_file}")

    return root
