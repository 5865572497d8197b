from pathlib import Path
from typing import Iterator, List
from webopt.domain.models import VideoFile

class FileScanner:
    """Lists input videos in a single directory, like a shell `*.mp4` glob."""

    def __init__(self, extensions: List[str]):
        self.extensions = list(extensions)

    def scan(self, directory: Path) -> Iterator[VideoFile]:
        if not directory.is_dir():
            return
        for path in sorted(directory.iterdir()):
            # Suffix match is case-sensitive and dotfiles are skipped, as with the glob
            if path.name.startswith(".") or not path.is_file():
                continue
            if path.suffix in self.extensions:
                yield VideoFile(path=path, size_bytes=path.stat().st_size)
