from __future__ import annotations

import unittest

from lazyfinder.runtime.debounce import DebounceScheduler


def _fire(scheduler: DebounceScheduler, now: float, **overrides: bool) -> bool:
    state = {"editing": True, "files_mode": True, "searching": False}
    state.update(overrides)
    return scheduler.should_fire(now, **state)


class DebounceSchedulerTests(unittest.TestCase):
    def test_burst_of_edits_fires_once_after_quiet_period(self) -> None:
        scheduler = DebounceScheduler(0.15)
        for offset in (0.0, 0.05, 0.10, 0.14):
            scheduler.note_edit(offset)
            self.assertFalse(_fire(scheduler, offset + 0.01))

        self.assertFalse(_fire(scheduler, 0.28))
        self.assertTrue(_fire(scheduler, 0.30))
        self.assertFalse(_fire(scheduler, 0.50))

    def test_does_not_fire_outside_file_mode_or_editing(self) -> None:
        scheduler = DebounceScheduler(0.15)
        scheduler.note_edit(0.0)

        self.assertFalse(_fire(scheduler, 1.0, files_mode=False))
        self.assertFalse(_fire(scheduler, 1.0, editing=False))
        self.assertTrue(_fire(scheduler, 1.0))

    def test_waits_while_a_search_is_in_flight(self) -> None:
        scheduler = DebounceScheduler(0.15)
        scheduler.note_edit(0.0)

        self.assertFalse(_fire(scheduler, 1.0, searching=True))
        self.assertTrue(_fire(scheduler, 1.1))

    def test_cancel_disarms(self) -> None:
        scheduler = DebounceScheduler(0.15)
        scheduler.note_edit(0.0)
        scheduler.cancel()

        self.assertFalse(_fire(scheduler, 1.0))

    def test_never_fires_without_an_edit(self) -> None:
        self.assertFalse(_fire(DebounceScheduler(0.0), 10.0))


if __name__ == "__main__":
    unittest.main()
