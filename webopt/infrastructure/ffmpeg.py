import os
import logging
import subprocess
import tempfile
import time
from collections import deque
from pathlib import Path
from typing import List, Optional, Tuple
from webopt.config.models import AppConfig
from webopt.domain.models import OptimizationJob, Step, StepOutcome, StepStatus

# Poster fallback offset from the end when the source is shorter than the poster timestamp
POSTER_END_OFFSET = 0.1

def format_timestamp(seconds: float) -> str:
    """Formats seconds as HH:MM:SS.mmm for -ss."""
    millis = int(round(seconds * 1000))
    hours, rem = divmod(millis, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    secs, millis = divmod(rem, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}.{millis:03d}"

class FFmpegAdapter:
    """Wrapper around ffmpeg producing the WebM, MP4 and poster renditions."""

    def __init__(self, config: AppConfig):
        self.config = config
        self.logger = logging.getLogger(__name__)

    def _input_args(self, job: OptimizationJob) -> List[str]:
        return [
            self.config.general.ffmpeg_bin,
            "-y",  # Overwrite output files
            "-i", str(job.source_file.path),
        ]

    def _trim_args(self, job: OptimizationJob) -> List[str]:
        if job.trim_seconds is None:
            return []
        return ["-t", str(job.trim_seconds)]

    def build_webm_command(self, job: OptimizationJob, pass_number: int, passlog_prefix: Path) -> List[str]:
        """Constructs one pass of the two-pass VP9/Opus encode."""
        webm = self.config.webm
        cmd = self._input_args(job) + self._trim_args(job)
        cmd.extend([
            "-vf", self.config.scale.filter,
            "-c:v", webm.video_codec,
            "-b:v", webm.video_bitrate,
            "-crf", str(webm.crf),
            "-c:a", webm.audio_codec,
            "-b:a", webm.audio_bitrate,
            "-pass", str(pass_number),
            "-passlogfile", str(passlog_prefix),
        ])
        if pass_number == 1:
            cmd.extend(["-f", "null", os.devnull])
        else:
            cmd.append(str(job.outputs.webm))
        return cmd

    def build_mp4_command(self, job: OptimizationJob) -> List[str]:
        mp4 = self.config.mp4
        cmd = self._input_args(job) + self._trim_args(job)
        cmd.extend([
            "-vf", self.config.scale.filter,
            "-c:v", mp4.video_codec,
            "-crf", str(mp4.crf),
            "-preset", mp4.preset,
        ])
        if mp4.faststart:
            cmd.extend(["-movflags", "+faststart"])
        cmd.append(str(job.outputs.mp4))
        return cmd

    def poster_position(self, job: OptimizationJob) -> float:
        """Poster timestamp, pulled back to the last frame for short sources."""
        wanted = self.config.poster.timestamp
        if job.duration is not None and job.duration <= wanted:
            return max(job.duration - POSTER_END_OFFSET, 0.0)
        return wanted

    def build_poster_command(self, job: OptimizationJob) -> List[str]:
        cmd = self._input_args(job)
        cmd.extend([
            "-ss", format_timestamp(self.poster_position(job)),
            "-vframes", "1",
            "-q:v", str(self.config.poster.quality),
            str(job.outputs.poster)
        ])
        return cmd

    def _run(self, job: OptimizationJob, step: Step, cmd: List[str]) -> Tuple[Optional[int], str]:
        """Runs ffmpeg. Returns (returncode, output tail)."""
        filename = job.source_file.path.name
        if self.config.general.debug:
            self.logger.debug(f"FFMPEG_CMD: {filename} {step.value}: {' '.join(cmd)}")

        try:
            process = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                universal_newlines=True,
                bufsize=1
            )
        except FileNotFoundError as e:
            self.logger.error(f"FFMPEG_MISSING: {filename} {step.value}: {e}")
            return None, str(e)

        tail = deque(maxlen=20)
        for line in process.stdout:
            tail.append(line.rstrip())

        process.wait()
        return process.returncode, "\n".join(tail)

    def _outcome(self, step: Step, output_path: Path, returncode: Optional[int], tail: str) -> StepOutcome:
        if returncode != 0:
            message = f"ffmpeg exited with code {returncode}" if returncode is not None else "ffmpeg could not be started"
            self.logger.debug(f"FFMPEG_OUTPUT: {step.value}:\n{tail}")
            return StepOutcome(step=step, status=StepStatus.FAILED, return_code=returncode,
                               error_message=message, output_path=output_path)
        if not output_path.exists():
            return StepOutcome(step=step, status=StepStatus.FAILED, return_code=returncode,
                               error_message="ffmpeg finished but produced no output", output_path=output_path)
        return StepOutcome(step=step, status=StepStatus.OK, return_code=returncode,
                           output_path=output_path, size_bytes=output_path.stat().st_size)

    def _log_end(self, job: OptimizationJob, outcome: StepOutcome, start_time: float):
        elapsed = time.monotonic() - start_time
        self.logger.info(
            f"FFMPEG_END: {job.source_file.path.name} step={outcome.step.value} "
            f"status={outcome.status.value} code={outcome.return_code} elapsed={elapsed:.2f}s"
        )

    def encode_webm(self, job: OptimizationJob) -> StepOutcome:
        """Two-pass encode; pass logs live in a temporary directory removed afterwards."""
        start_time = time.monotonic()
        with tempfile.TemporaryDirectory(prefix="webopt-pass-") as passlog_dir:
            prefix = Path(passlog_dir) / "ffmpeg2pass"
            code, tail = self._run(job, Step.WEBM, self.build_webm_command(job, 1, prefix))
            if code != 0:
                outcome = self._outcome(Step.WEBM, job.outputs.webm, code, tail)
                outcome.error_message = f"pass 1: {outcome.error_message}"
            else:
                code, tail = self._run(job, Step.WEBM, self.build_webm_command(job, 2, prefix))
                outcome = self._outcome(Step.WEBM, job.outputs.webm, code, tail)
        self._log_end(job, outcome, start_time)
        return outcome

    def encode_mp4(self, job: OptimizationJob) -> StepOutcome:
        start_time = time.monotonic()
        code, tail = self._run(job, Step.MP4, self.build_mp4_command(job))
        outcome = self._outcome(Step.MP4, job.outputs.mp4, code, tail)
        self._log_end(job, outcome, start_time)
        return outcome

    def extract_poster(self, job: OptimizationJob) -> StepOutcome:
        start_time = time.monotonic()
        code, tail = self._run(job, Step.POSTER, self.build_poster_command(job))
        outcome = self._outcome(Step.POSTER, job.outputs.poster, code, tail)
        self._log_end(job, outcome, start_time)
        return outcome
