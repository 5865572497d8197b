import logging
import concurrent.futures
from pathlib import Path
from typing import List, Optional
from webopt.config.models import AppConfig
from webopt.infrastructure.event_bus import EventBus
from webopt.infrastructure.file_scanner import FileScanner
from webopt.infrastructure.ffprobe import FFprobeAdapter
from webopt.infrastructure.ffmpeg import FFmpegAdapter
from webopt.domain.errors import NoInputFilesError
from webopt.domain.models import (
    JobStatus, OptimizationJob, OutputSet, Step, StepOutcome, StepStatus, VideoFile
)
from webopt.domain.events import (
    BatchFinished, DiscoveryStarted, DiscoveryFinished, JobStarted, JobCompleted,
    JobFailed, StepStarted, StepFinished
)

OUTPUT_SUBDIRS = ("webm", "mp4", "posters")

class Orchestrator:
    def __init__(
        self,
        config: AppConfig,
        event_bus: EventBus,
        file_scanner: FileScanner,
        ffprobe_adapter: FFprobeAdapter,
        ffmpeg_adapter: FFmpegAdapter
    ):
        self.config = config
        self.event_bus = event_bus
        self.file_scanner = file_scanner
        self.ffprobe_adapter = ffprobe_adapter
        self.ffmpeg_adapter = ffmpeg_adapter
        self.logger = logging.getLogger(__name__)

    @property
    def output_dir(self) -> Path:
        return self.config.general.output_dir

    def prepare_output_dirs(self):
        for name in OUTPUT_SUBDIRS:
            (self.output_dir / name).mkdir(parents=True, exist_ok=True)

    def discover(self, input_dir: Path) -> List[VideoFile]:
        self.event_bus.publish(DiscoveryStarted(directory=input_dir))
        files = list(self.file_scanner.scan(input_dir))
        self.event_bus.publish(DiscoveryFinished(directory=input_dir, files_found=len(files)))
        if not files:
            raise NoInputFilesError(input_dir, self.config.general.extensions)
        return files

    def create_job(self, video_file: VideoFile) -> OptimizationJob:
        return OptimizationJob(
            source_file=video_file,
            outputs=OutputSet.for_base_name(self.output_dir, video_file.base_name)
        )

    def decide_trim(self, duration_seconds: Optional[int]) -> Optional[int]:
        """Trim length when the source runs past max_seconds, else None."""
        limit = self.config.general.max_seconds
        if limit is None or duration_seconds is None:
            return None
        if duration_seconds > limit:
            return limit
        return None

    def _record(self, job: OptimizationJob, outcome: StepOutcome):
        job.outcomes.append(outcome)
        self.event_bus.publish(StepFinished(job=job, outcome=outcome))

    def _probe(self, job: OptimizationJob) -> StepOutcome:
        try:
            job.duration = self.ffprobe_adapter.get_duration(job.source_file.path)
            outcome = StepOutcome(step=Step.PROBE, status=StepStatus.OK)
        except RuntimeError as e:
            self.logger.warning(f"Duration probe failed for {job.source_file.path.name}: {e}")
            outcome = StepOutcome(step=Step.PROBE, status=StepStatus.FAILED, error_message=str(e))
        return outcome

    def _fail(self, job: OptimizationJob, message: str):
        job.status = JobStatus.FAILED
        job.error_message = message
        self.event_bus.publish(JobFailed(job=job, error_message=message))

    def process_job(self, job: OptimizationJob):
        """Runs probe, trim decision, WebM, MP4 and poster for one input, in that order."""
        filename = job.source_file.path.name
        job.status = JobStatus.PROCESSING
        self.event_bus.publish(JobStarted(job=job))

        if not job.source_file.path.is_file():
            self.logger.error(f"Input missing: {job.source_file.path}")
            self._fail(job, f"{job.source_file.path} not found")
            return

        try:
            probe_outcome = self._probe(job)
            job.trim_seconds = self.decide_trim(job.duration_seconds)
            if job.trim_seconds is not None:
                self.logger.info(f"Trimming {filename} from {job.duration_seconds}s to {job.trim_seconds}s")
            self._record(job, probe_outcome)

            steps = (
                (Step.WEBM, self.ffmpeg_adapter.encode_webm),
                (Step.MP4, self.ffmpeg_adapter.encode_mp4),
                (Step.POSTER, self.ffmpeg_adapter.extract_poster),
            )
            for step, action in steps:
                self.event_bus.publish(StepStarted(job=job, step=step))
                self._record(job, action(job))
        except Exception as e:
            # Log exception but keep the batch going
            self.logger.exception(f"Exception processing {filename}: {e}")
            self._fail(job, f"Exception: {e}")
            return

        failed = job.failed_steps
        if failed:
            self._fail(job, "; ".join(f"{o.step.value}: {o.error_message}" for o in failed))
        else:
            job.status = JobStatus.COMPLETED
            self.event_bus.publish(JobCompleted(job=job))

    def reject_duplicates(self, jobs: List[OptimizationJob]) -> List[OptimizationJob]:
        """Fails every job whose outputs would overwrite an earlier job's; returns the rest."""
        owners = {}
        runnable = []
        for job in jobs:
            first = owners.setdefault(job.base_name, job)
            if first is job:
                runnable.append(job)
                continue
            self.logger.error(f"Output name clash: {job.source_file.path} and {first.source_file.path}")
            job.status = JobStatus.PROCESSING
            self.event_bus.publish(JobStarted(job=job))
            self._fail(job, f"output name '{job.base_name}' already used by {first.source_file.path}")
        return runnable

    def run(self, input_dir: Optional[Path] = None) -> List[OptimizationJob]:
        input_dir = input_dir or self.config.general.input_dir
        self.prepare_output_dirs()
        files = self.discover(input_dir)
        jobs = [self.create_job(vf) for vf in files]
        runnable = self.reject_duplicates(jobs)

        threads = self.config.general.threads
        if threads == 1:
            for job in runnable:
                self.process_job(job)
        else:
            with concurrent.futures.ThreadPoolExecutor(max_workers=threads) as executor:
                futures = {executor.submit(self.process_job, job): job for job in runnable}
                for future in concurrent.futures.as_completed(futures):
                    try:
                        future.result()
                    except Exception as e:
                        self.logger.error(f"Future failed with exception: {e}")

        completed = sum(1 for j in jobs if j.status == JobStatus.COMPLETED)
        self.event_bus.publish(BatchFinished(
            output_dir=self.output_dir,
            total=len(jobs),
            completed=completed,
            failed=len(jobs) - completed
        ))
        return jobs
