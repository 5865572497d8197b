import logging
from pathlib import Path
from typing import Optional

LOG_FILENAME = "webopt.log"

_file_handler: Optional[logging.FileHandler] = None

def setup_logging(output_dir: Path, debug: bool = False) -> logging.Logger:
    """Sends log records to <output_dir>/webopt.log; the console belongs to the reporter."""
    global _file_handler
    output_dir.mkdir(parents=True, exist_ok=True)
    root = logging.getLogger()

    if _file_handler is not None:
        root.removeHandler(_file_handler)
        _file_handler.close()

    _file_handler = logging.FileHandler(output_dir / LOG_FILENAME, encoding="utf-8")
    _file_handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(name)s - %(message)s'))
    root.addHandler(_file_handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)

    return logging.getLogger("webopt")
