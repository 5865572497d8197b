from pathlib import Path
from pydantic import BaseModel
from .models import OptimizationJob, Step, StepOutcome

class Event(BaseModel):
    """Base class for all domain events."""
    pass

class DiscoveryStarted(Event):
    directory: Path

class DiscoveryFinished(Event):
    directory: Path
    files_found: int

class JobEvent(Event):
    job: OptimizationJob

class JobStarted(JobEvent):
    pass

class StepStarted(JobEvent):
    step: Step

class StepFinished(JobEvent):
    outcome: StepOutcome

class JobCompleted(JobEvent):
    pass

class JobFailed(JobEvent):
    error_message: str

class BatchFinished(Event):
    output_dir: Path
    total: int
    completed: int
    failed: int
