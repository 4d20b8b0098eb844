from __future__ import annotations
import logging
import logging.config
from pathlib import Path
from typing import Optional
import yaml

ROOT_LOGGER = "livesurf"
DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(threadName)s | %(message)s"


def setup_logging(config_path: Optional[str] = "configs/logging.yaml", level: int = logging.INFO) -> None:
    """
    Configure logging from a YAML dictConfig file.

    Falls back to a basicConfig with the default format when the file is
    missing, so library users never end up with silent retries.
    """
    path = Path(config_path) if config_path else None
    if path is None or not path.exists():
        logging.basicConfig(level=level, format=DEFAULT_FORMAT)
        return

    with path.open("r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)
    logging.config.dictConfig(cfg)


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the `livesurf` namespace."""
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
