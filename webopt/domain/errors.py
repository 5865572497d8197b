from pathlib import Path

class NoInputFilesError(RuntimeError):
    """Raised when discovery finds nothing to optimize."""

    def __init__(self, directory: Path, extensions):
        self.directory = directory
        self.extensions = list(extensions)
        pattern = ", ".join(f"*{ext}" for ext in self.extensions)
        super().__init__(f"No {pattern} files found in {directory}/ directory")
