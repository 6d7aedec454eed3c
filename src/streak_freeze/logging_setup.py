import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_DIR = Path.home() / ".streak-freeze" / "logs"
LOG_FILE = LOG_DIR / "streak_freeze.log"


def setup_logger(log_file: Path | None = None, level: int = logging.INFO) -> logging.Logger:
    path = log_file or LOG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    logger = logging.getLogger("streak_freeze")
    logger.setLevel(level)

    if not logger.handlers:
        handler = RotatingFileHandler(
            path,
            maxBytes=1_000_000,
            backupCount=3,
            encoding="utf-8",
        )
        fmt = logging.Formatter("%(asctime)s | %(levelname)s | %(message)s")
        handler.setFormatter(fmt)
        logger.addHandler(handler)

    return logger
