from __future__ import annotations
import logging, sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from resizer.config import LOG_FILE, LOGGER_NAME

BANNER = "=" * 75
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"

def build_logger(name: str = LOGGER_NAME, log_file: Path | None = LOG_FILE,
                 level: int = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers.clear()

    fmt = logging.Formatter(LOG_FORMAT)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(exist_ok=True, parents=True)
        fh = RotatingFileHandler(log_file, maxBytes=5_000_000, backupCount=3, encoding="utf-8")
        fh.setFormatter(fmt)
        fh.setLevel(level)
        logger.addHandler(fh)

    sh = logging.StreamHandler(sys.stdout)
    sh.setFormatter(fmt)
    sh.setLevel(level)
    logger.addHandler(sh)
    return logger

class QtTailHandler(logging.Handler):
    def __init__(self, signal_emit):
        super().__init__()
        self.emit_to_gui = signal_emit
        self.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
            self.emit_to_gui(line)
        except Exception:
            self.handleError(record)

class log_section:
    def __init__(self, title: str, logger: logging.Logger):
        self.title = title
        self.logger = logger

    def __enter__(self):
        self.logger.info("\n%s\n%s\n%s", BANNER, self.title, BANNER)

    def __exit__(self, exc_type, exc, tb):
        return False
