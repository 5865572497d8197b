import logging
import yaml
from pathlib import Path
from typing import Optional, Union
from webopt.config.models import AppConfig

logger = logging.getLogger(__name__)

def load_config(config_path: Optional[Union[str, Path]] = None) -> AppConfig:
    """Loads YAML config, falling back to defaults when the file is absent."""
    if config_path is None:
        return AppConfig()

    path = Path(config_path)
    if not path.exists():
        logger.debug(f"Config {path} not found, using defaults")
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return AppConfig()
    if not isinstance(data, dict):
        raise ValueError(f"Config {path} must contain a mapping, got {type(data).__name__}")

    return AppConfig(**data)
