from __future__ import annotations

"""
Entry point for the resolution-map-builder command.

Installs a last-resort crash hook, then hands over to the CLI controller.
"""

import logging
import os
import sys
import traceback
from typing import Any

# Running this file directly (python src/resolution_map_builder/main.py)
SRC_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)


def report_crash(exctype: type[BaseException], value: BaseException, tb: Any) -> None:
    """Log an unexpected exception at CRITICAL and exit with status 1."""
    details = "".join(traceback.format_exception(exctype, value, tb))
    logging.getLogger("resolution_map_builder.main").critical(f"Unexpected crash: {value}\n{details}")
    sys.stderr.write(f"resolution-map-builder crashed:\n{details}")
    sys.exit(1)


def main() -> int:
    sys.excepthook = report_crash
    from resolution_map_builder.interface.cli.app import main as cli_main
    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
