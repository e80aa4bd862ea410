"""Root logger setup.

Log records go to a rotating file and, for warnings and errors, to stderr.
Modules log through ``logging.getLogger(__name__)``.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path

from xlsxsender.config.models import LoggingSettings
from xlsxsender.shared.constants import Logging

_OWNED = "_xlsxsender_handler"


def setup_logging(
    settings: LoggingSettings | None = None,
    *,
    log_level: str | None = None,
    log_file: str | Path | None = None,
) -> None:
    """Install the xlsx-sender handlers on the root logger.

    Args:
        settings: Logging settings. If None, defaults are used.
        log_level: Overrides the configured level (e.g. from ``--log-level``).
        log_file: Overrides the configured log file path.
    """
    settings = settings or LoggingSettings()
    level_name = (log_level or settings.level).upper()
    level = getattr(logging, level_name, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Replace handlers installed by a previous call
    for handler in list(root_logger.handlers):
        if getattr(handler, _OWNED, False):
            root_logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(
        fmt=settings.format_string,
        datefmt=Logging.DATE_FORMAT,
    )

    # An empty file setting disables file logging
    if log_file or settings.file:
        log_path = Path(log_file or settings.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=str(log_path),
            maxBytes=settings.max_bytes,
            backupCount=settings.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        setattr(file_handler, _OWNED, True)
        root_logger.addHandler(file_handler)

    if settings.console_output:
        # stderr keeps stdout clean for --json output
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(max(level, logging.WARNING))
        console_handler.setFormatter(formatter)
        setattr(console_handler, _OWNED, True)
        root_logger.addHandler(console_handler)
