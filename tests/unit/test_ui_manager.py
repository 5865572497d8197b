from pathlib import Path
from webopt.infrastructure.event_bus import EventBus
from webopt.ui.state import UIState
from webopt.ui.manager import UIManager
from webopt.domain.events import JobCompleted, JobFailed, StepFinished
from webopt.domain.models import JobStatus, OptimizationJob, OutputSet, Step, StepOutcome, StepStatus, VideoFile

def make_job(name: str) -> OptimizationJob:
    vf = VideoFile(path=Path("videos") / name, size_bytes=1000)
    return OptimizationJob(source_file=vf, outputs=OutputSet.for_base_name(Path("optimized"), vf.base_name))

def test_ui_manager_counts_completed_jobs_and_bytes():
    bus = EventBus()
    state = UIState()
    UIManager(bus, state)
    job = make_job("clip.mp4")

    bus.publish(StepFinished(job=job, outcome=StepOutcome(step=Step.WEBM, status=StepStatus.OK, size_bytes=300)))
    bus.publish(StepFinished(job=job, outcome=StepOutcome(step=Step.MP4, status=StepStatus.OK, size_bytes=200)))
    bus.publish(StepFinished(job=job, outcome=StepOutcome(step=Step.POSTER, status=StepStatus.FAILED)))
    job.status = JobStatus.COMPLETED
    bus.publish(JobCompleted(job=job))

    assert state.completed_count == 1
    assert state.failed_count == 0
    assert state.total_output_bytes == 500

def test_ui_manager_counts_failures():
    bus = EventBus()
    state = UIState()
    UIManager(bus, state)

    bus.publish(JobFailed(job=make_job("broken.mp4"), error_message="videos/broken.mp4 not found"))
    bus.publish(JobFailed(job=make_job("other.mp4"), error_message="mp4: ffmpeg exited with code 1"))

    assert state.failed_count == 2
    assert state.completed_count == 0
