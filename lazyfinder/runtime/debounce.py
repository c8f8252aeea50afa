"""Polled debounce for live filename search."""

from __future__ import annotations

DEFAULT_DEBOUNCE_SECONDS = 0.15


class DebounceScheduler:
    """Fire once after input has been quiet for ``interval`` seconds.

    ``note_edit`` arms the scheduler and records the edit time; the loop asks
    ``should_fire`` every tick. A fire disarms until the next edit, so one idle
    period can never trigger two searches.
    """

    def __init__(self, interval: float = DEFAULT_DEBOUNCE_SECONDS) -> None:
        self.interval = max(0.0, interval)
        self.last_edit_at: float | None = None
        self.armed = False

    def note_edit(self, now: float) -> None:
        self.last_edit_at = now
        self.armed = True

    def cancel(self) -> None:
        self.armed = False

    def should_fire(
        self,
        now: float,
        *,
        editing: bool,
        files_mode: bool,
        searching: bool,
    ) -> bool:
        if not (self.armed and editing and files_mode) or searching:
            return False
        if self.last_edit_at is None or now - self.last_edit_at < self.interval:
            return False
        self.armed = False
        return True


__all__ = ["DEFAULT_DEBOUNCE_SECONDS", "DebounceScheduler"]
