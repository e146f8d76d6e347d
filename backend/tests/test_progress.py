"""Tests for the OCR progress store."""

from __future__ import annotations

from promo_report.services.progress import Progress, ProgressStore


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def test_unknown_session_has_no_progress() -> None:
    assert ProgressStore().get("missing") == Progress()


def test_percent_is_rounded() -> None:
    store = ProgressStore()
    store.set("s", 1, 3)

    assert store.get("s").percent == 33
    assert Progress(completed=0, total=0).percent == 0


def test_finished_progress_expires() -> None:
    clock = FakeClock()
    store = ProgressStore(ttl_seconds=60, clock=clock)
    store.set("s", 1, 2)
    store.finish("s")

    clock.now += 59
    assert store.get("s").percent == 100

    clock.now += 1
    assert store.get("s") == Progress()


def test_clear_removes_entry() -> None:
    store = ProgressStore()
    store.set("s", 2, 4)
    store.clear("s")
    store.clear("s")

    assert store.get("s").total == 0
