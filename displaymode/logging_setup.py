from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .config import AppConfig


def setup_logging(config: AppConfig, verbose: bool = False) -> None:
    """Configure rotating file logging with a console handler.

    The console only shows warnings unless ``verbose``. The file under
    ``config.logs_dir`` keeps the full record; if it cannot be opened we
    carry on with the console alone.
    """

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    log_file: Path = config.logs_dir / "displaymode.log"
    try:
        config.ensure_data_dirs()
        file_handler = RotatingFileHandler(str(log_file), maxBytes=1_000_000, backupCount=3)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        logging.getLogger(__name__).debug("File logging enabled at %s", log_file)
    except OSError as exc:
        logging.getLogger(__name__).warning("File logging unavailable (%s); using console only", exc)
