import logging
from pathlib import Path
from typing import List

# Pass logs ffmpeg writes to the working directory when -passlogfile is not given
STALE_PATTERNS = ["ffmpeg2pass-*.log", "ffmpeg2pass-*.log.mbtree", "ffmpeg2pass-*.log.temp"]

class HousekeepingService:
    """Removes leftovers of interrupted two-pass encodes."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def cleanup_pass_logs(self, directory: Path) -> List[Path]:
        removed = []
        for pattern in STALE_PATTERNS:
            for path in directory.glob(pattern):
                if not path.is_file():
                    continue
                try:
                    path.unlink()
                    removed.append(path)
                except OSError as e:
                    self.logger.warning(f"Could not remove stale pass log {path}: {e}")
        if removed:
            self.logger.info(f"Removed {len(removed)} stale pass log(s) from {directory}")
        return removed
