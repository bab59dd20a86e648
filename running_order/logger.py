import logging
import os
import sys

LOG_FILE_ENV = "RUNNING_ORDER_LOG_FILE"

logger = logging.getLogger("running_order")
logger.setLevel(logging.INFO)

# Prevent duplicate handlers when Streamlit re-runs the script
if not logger.handlers:
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.addHandler(stream_handler)

    log_path = os.environ.get(LOG_FILE_ENV, "")
    if log_path:
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(file_handler)


class DiagnosticsHandler(logging.Handler):
    """Collects formatted records in a list so the UI can show the last run's log."""

    def __init__(self, lines=None):
        super().__init__(logging.INFO)
        self.lines = lines if lines is not None else []
        self.setFormatter(logging.Formatter("%(message)s"))

    def emit(self, record):
        self.lines.append(self.format(record))
