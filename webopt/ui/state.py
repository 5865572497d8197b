import threading

class UIState:
    """Thread-safe run counters fed by UIManager."""

    def __init__(self):
        self._lock = threading.RLock()
        self.completed_count = 0
        self.failed_count = 0
        self.total_output_bytes = 0

    def add_output_bytes(self, size: int):
        with self._lock:
            self.total_output_bytes += size

    def add_completed_job(self):
        with self._lock:
            self.completed_count += 1

    def add_failed_job(self):
        with self._lock:
            self.failed_count += 1
