import math
import subprocess
from pathlib import Path

class FFprobeAdapter:
    """Wrapper around ffprobe for container duration lookups."""

    def __init__(self, binary: str = "ffprobe"):
        self.binary = binary

    def _build_command(self, file_path: Path):
        return [
            self.binary,
            "-v", "quiet",
            "-show_entries", "format=duration",
            "-of", "default=noprint_wrappers=1:nokey=1",
            str(file_path)
        ]

    def get_duration(self, file_path: Path) -> float:
        """Returns the container duration in seconds."""
        try:
            result = subprocess.run(self._build_command(file_path), capture_output=True, text=True)
        except FileNotFoundError as e:
            raise RuntimeError(f"ffprobe not available: {e}") from e

        if result.returncode != 0:
            raise RuntimeError(f"ffprobe failed for {file_path}: {result.stderr.strip()}")

        raw = result.stdout.strip().splitlines()
        value = raw[0].strip() if raw else ""
        try:
            duration = float(value)
        except ValueError:
            duration = None
        if duration is None or not math.isfinite(duration) or duration < 0:
            raise RuntimeError(f"ffprobe returned no usable duration for {file_path}: {value!r}")
        return duration
