import threading
from unittest.mock import MagicMock
from webopt.domain.events import StepStarted
from webopt.domain.models import JobStatus, Step
from webopt.infrastructure.event_bus import EventBus
from webopt.infrastructure.file_scanner import FileScanner
from webopt.infrastructure.ffmpeg import FFmpegAdapter
from webopt.pipeline.orchestrator import Orchestrator

def test_parallel_jobs_keep_step_order(app_config, make_video, fake_ffmpeg):
    """Jobs run on a pool; each job's own steps stay ordered."""
    app_config.general.threads = 3
    names = [f"clip{i}.mp4" for i in range(6)]
    for name in names:
        make_video(name)

    bus = EventBus()
    steps_by_job = {}
    lock = threading.Lock()

    def record(event):
        with lock:
            steps_by_job.setdefault(event.job.base_name, []).append(event.step)

    bus.subscribe(StepStarted, record)
    ffprobe = MagicMock()
    ffprobe.get_duration.return_value = 8.0

    orchestrator = Orchestrator(
        config=app_config,
        event_bus=bus,
        file_scanner=FileScanner(app_config.general.extensions),
        ffprobe_adapter=ffprobe,
        ffmpeg_adapter=FFmpegAdapter(config=app_config)
    )
    jobs = orchestrator.run()

    assert all(j.status == JobStatus.COMPLETED for j in jobs)
    assert len(steps_by_job) == 6
    assert all(steps == [Step.WEBM, Step.MP4, Step.POSTER] for steps in steps_by_job.values())

    # every job gets its own pass-log directory
    prefixes = {c[c.index("-passlogfile") + 1] for c in fake_ffmpeg.calls if "-passlogfile" in c}
    assert len(prefixes) == 6
