import logging
from webopt.infrastructure.event_bus import EventBus
from webopt.ui.state import UIState
from webopt.domain.models import StepStatus
from webopt.domain.events import JobCompleted, JobFailed, StepFinished

class UIManager:
    """Subscribes to EventBus and updates UIState."""

    def __init__(self, bus: EventBus, state: UIState):
        self.bus = bus
        self.state = state
        self.logger = logging.getLogger(__name__)
        self._setup_subscriptions()

    def _setup_subscriptions(self):
        self.bus.subscribe(StepFinished, self.on_step_finished)
        self.bus.subscribe(JobCompleted, self.on_job_completed)
        self.bus.subscribe(JobFailed, self.on_job_failed)

    def on_step_finished(self, event: StepFinished):
        if event.outcome.status == StepStatus.OK and event.outcome.size_bytes:
            self.state.add_output_bytes(event.outcome.size_bytes)

    def on_job_completed(self, event: JobCompleted):
        self.state.add_completed_job()

    def on_job_failed(self, event: JobFailed):
        self.logger.debug(f"UI: {event.job.source_file.path.name} failed: {event.error_message}")
        self.state.add_failed_job()
