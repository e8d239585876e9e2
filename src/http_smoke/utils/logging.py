from __future__ import annotations
import logging
import logging.config
from pathlib import Path
from typing import Optional
import yaml

DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(config_path: str = "configs/logging.yaml", level: Optional[int] = None) -> None:
    """Setup logging from a dictConfig YAML file, falling back to basicConfig."""
    path = Path(config_path)
    if not path.exists():
        logging.basicConfig(level=level or logging.WARNING, format=DEFAULT_FORMAT)
        return

    with path.open("r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)
    logging.config.dictConfig(cfg)

    if level is not None:
        logging.getLogger("http_smoke").setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)
