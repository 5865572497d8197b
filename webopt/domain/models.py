from enum import Enum
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field

class JobStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

class Step(str, Enum):
    PROBE = "probe"
    WEBM = "webm"
    MP4 = "mp4"
    POSTER = "poster"

class StepStatus(str, Enum):
    OK = "ok"
    FAILED = "failed"

class StepOutcome(BaseModel):
    step: Step
    status: StepStatus
    return_code: Optional[int] = None
    error_message: Optional[str] = None
    output_path: Optional[Path] = None
    size_bytes: Optional[int] = None

class VideoFile(BaseModel):
    path: Path
    size_bytes: int = 0

    @property
    def base_name(self) -> str:
        return self.path.stem

class OutputSet(BaseModel):
    """Artifact paths derived from a job's base name."""
    webm: Path
    mp4: Path
    poster: Path

    @classmethod
    def for_base_name(cls, output_dir: Path, base_name: str) -> "OutputSet":
        return cls(
            webm=output_dir / "webm" / f"{base_name}.webm",
            mp4=output_dir / "mp4" / f"{base_name}.mp4",
            poster=output_dir / "posters" / f"{base_name}-poster.jpg",
        )

class OptimizationJob(BaseModel):
    source_file: VideoFile
    outputs: OutputSet
    status: JobStatus = JobStatus.PENDING
    duration: Optional[float] = None
    trim_seconds: Optional[int] = None
    outcomes: List[StepOutcome] = Field(default_factory=list)
    error_message: Optional[str] = None

    @property
    def base_name(self) -> str:
        return self.source_file.base_name

    @property
    def duration_seconds(self) -> Optional[int]:
        """Probed duration truncated to whole seconds."""
        if self.duration is None:
            return None
        return int(self.duration)

    @property
    def failed_steps(self) -> List[StepOutcome]:
        return [o for o in self.outcomes if o.status == StepStatus.FAILED]

    def outcome(self, step: Step) -> Optional[StepOutcome]:
        for o in self.outcomes:
            if o.step == step:
                return o
        return None
