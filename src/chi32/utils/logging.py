"""Logger factory shared by the CLI and the harnesses."""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"


def get_logger(
    name: str,
    log_file: Optional[Union[str, Path]] = None,
    level: int = logging.INFO,
) -> logging.Logger:
    """Get a configured logger.

    Handlers are attached once per logger name: a stderr stream handler and,
    when log_file is given, a file handler. stdout stays free for data
    (the streamer writes raw bytes there).

    Args:
        name: Logger name (nested under "chi32")
        log_file: Optional path of a log file to append to
        level: Logging level

    Returns:
        logging.Logger instance
    """
    full_name = name if name.startswith("chi32") else f"chi32.{name}"
    logger = logging.getLogger(full_name)
    logger.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if not any(getattr(h, "_chi32_stream", False) for h in logger.handlers):
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        stream_handler._chi32_stream = True
        logger.addHandler(stream_handler)

    if log_file is not None:
        log_path = Path(log_file).resolve()
        known = {
            getattr(h, "baseFilename", None)
            for h in logger.handlers
            if isinstance(h, logging.FileHandler)
        }
        if str(log_path) not in known:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    # Propagate so pytest's caplog sees records
    logger.propagate = True
    return logger
