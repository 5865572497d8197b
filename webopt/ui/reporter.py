from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.markup import escape
from webopt.infrastructure.event_bus import EventBus
from webopt.domain.models import Step, StepStatus
from webopt.domain.events import (
    DiscoveryStarted, DiscoveryFinished, JobStarted, JobCompleted, JobFailed,
    StepStarted, StepFinished, BatchFinished
)

STEP_LABELS = {
    Step.WEBM: "WebM",
    Step.MP4: "MP4",
    Step.POSTER: "Poster",
}

STEP_STARTED = {
    Step.WEBM: "Creating WebM version...",
    Step.MP4: "Creating MP4 version...",
    Step.POSTER: "Creating poster image...",
}

def format_size(size: int) -> str:
    """Format size in bytes to human readable"""
    if size == 0:
        return "0B"
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size < 1024.0:
            return f"{size:.1f}{unit}"
        size /= 1024.0
    return f"{size:.1f}TB"

class ConsoleReporter:
    """Prints per-file progress and the batch summary."""

    def __init__(self, bus: EventBus, console: Optional[Console] = None,
                 size_target_mb: Optional[float] = None, tag_lines: bool = False):
        self.bus = bus
        self.console = console or Console()
        self.size_target_mb = size_target_mb
        # With parallel jobs each line carries the base name
        self.tag_lines = tag_lines
        self._setup_subscriptions()

    def _setup_subscriptions(self):
        self.bus.subscribe(DiscoveryStarted, self.on_discovery_started)
        self.bus.subscribe(DiscoveryFinished, self.on_discovery_finished)
        self.bus.subscribe(JobStarted, self.on_job_started)
        self.bus.subscribe(StepStarted, self.on_step_started)
        self.bus.subscribe(StepFinished, self.on_step_finished)
        self.bus.subscribe(JobCompleted, self.on_job_completed)
        self.bus.subscribe(JobFailed, self.on_job_failed)
        self.bus.subscribe(BatchFinished, self.on_batch_finished)

    def _line(self, job, text: str):
        prefix = f"[dim]\\[{escape(job.base_name)}][/dim] " if self.tag_lines else ""
        self.console.print(f"   {prefix}{text}")

    def _over_target(self, size: int) -> bool:
        if self.size_target_mb is None:
            return False
        return size > self.size_target_mb * 1024 * 1024

    def error(self, message: str):
        self.console.print(f"[red]❌ {escape(message)}[/red]")

    def on_discovery_started(self, event: DiscoveryStarted):
        self.console.print("🔍 Scanning for video files...")

    def on_discovery_finished(self, event: DiscoveryFinished):
        if event.files_found:
            self.console.print(f"📊 Found {event.files_found} video files to process")
            self.console.print()

    def on_job_started(self, event: JobStarted):
        self.console.print(f"📹 Processing: {escape(str(event.job.source_file.path))}")

    def on_step_started(self, event: StepStarted):
        self._line(event.job, f"🔄 {STEP_STARTED[event.step]}")

    def on_step_finished(self, event: StepFinished):
        job, outcome = event.job, event.outcome
        if outcome.step == Step.PROBE:
            if outcome.status == StepStatus.OK:
                self._line(job, f"Duration: {job.duration_seconds}s")
                if job.trim_seconds is not None:
                    self._line(job, f"[yellow]⚠️  Video longer than {job.trim_seconds}s, trimming to {job.trim_seconds}s[/yellow]")
            else:
                self._line(job, f"[yellow]⚠️  Could not read duration, encoding full length: {escape(outcome.error_message or '')}[/yellow]")
            return

        label = STEP_LABELS[outcome.step]
        if outcome.status != StepStatus.OK:
            self._line(job, f"[red]❌ {label} failed: {escape(outcome.error_message or 'unknown error')}[/red]")
            return
        if outcome.step == Step.POSTER:
            self._line(job, "[green]✅ Poster created[/green]")
            return

        size = outcome.size_bytes or 0
        text = f"[green]✅ {label} created: {format_size(size)}[/green]"
        if self._over_target(size):
            text += f" [yellow](above {self.size_target_mb:g}MB target)[/yellow]"
        self._line(job, text)

    def on_job_completed(self, event: JobCompleted):
        self._line(event.job, f"✨ Completed: {escape(event.job.base_name)}")
        self.console.print()

    def on_job_failed(self, event: JobFailed):
        if not event.job.outcomes:
            self._line(event.job, f"[red]❌ Error: {escape(event.error_message)}[/red]")
        else:
            self._line(event.job, f"[red]⚠️  Finished with errors: {escape(event.job.base_name)}[/red]")
        self.console.print()

    def on_batch_finished(self, event: BatchFinished):
        out = escape(str(Path(event.output_dir)))
        self.console.print("🎉 Video optimization complete!")
        self.console.print(
            f"   {event.total} processed, [green]{event.completed} ok[/green], "
            f"[{'red' if event.failed else 'green'}]{event.failed} with errors[/]"
        )
        self.console.print()
        self.console.print("📁 Output structure:")
        self.console.print(f"   📂 {out}/webm/     - WebM versions (better compression)")
        self.console.print(f"   📂 {out}/mp4/      - MP4 versions (broader compatibility)")
        self.console.print(f"   📂 {out}/posters/  - Poster images")
        self.console.print()
        self.console.print("💡 Next steps:")
        self.console.print("   1. Test the optimized videos in your browser")
        if self.size_target_mb is not None:
            self.console.print(f"   2. Check file sizes are within the {self.size_target_mb:g}MB target")
        else:
            self.console.print("   2. Check file sizes suit your pages")
        self.console.print("   3. Verify video quality meets your standards")
