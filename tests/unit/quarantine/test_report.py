"""Unit tests for RunReport."""

import threading
from pathlib import Path

from filequarantine.core.config import QuarantineConfig
from filequarantine.quarantine.models import ActionOutcome, ActionType, ErrorKind
from filequarantine.quarantine.report import RunContext, RunReport


def _report(**config: object) -> RunReport:
    context = RunContext.from_config(QuarantineConfig(**config))
    return RunReport(context=context)


def _ok(action: ActionType, size: int, size_after: int | None = None) -> ActionOutcome:
    return ActionOutcome(
        action, f"/srv/{action.value}", size, succeeded=True, size_after=size_after
    )


class TestRunContext:
    """Tests for RunContext.from_config."""

    def test_captures_config(self) -> None:
        """Paths become strings and extensions are sorted."""
        context = RunContext.from_config(
            QuarantineConfig(
                scan_roots=(Path("/srv"), Path("/opt")),
                extensions={"tmp", "bak"},
                retention_days=7,
            )
        )

        assert context.scan_roots == ("/srv", "/opt")
        assert context.extensions == ("bak", "tmp")
        assert context.retention_days == 7
        assert context.hostname


class TestRunReport:
    """Tests for RunReport accumulation."""

    def test_counts_and_totals(self) -> None:
        """Each successful outcome lands in its action's list."""
        report = _report()

        report.record(_ok(ActionType.QUARANTINE, 200))
        report.record(_ok(ActionType.QUARANTINE, 300))
        report.record(_ok(ActionType.DELETE, 50))
        report.record(_ok(ActionType.TRUNCATE, 2048, size_after=1024))

        assert report.count_quarantined == 2
        assert report.total_size_quarantined == 500
        assert report.count_deleted == 1
        assert report.total_size_deleted == 50
        assert report.count_truncated == 1
        assert report.total_size_freed == 1024
        assert report.count_failed == 0

    def test_failures_do_not_move_success_counters(self) -> None:
        """Failed outcomes only go to failures."""
        report = _report()
        failure = ActionOutcome(
            ActionType.QUARANTINE,
            "/srv/a.sql",
            200,
            succeeded=False,
            error_kind=ErrorKind.IO_FAILURE,
            error="denied",
        )

        report.record(failure)

        assert report.count_quarantined == 0
        assert report.total_size_quarantined == 0
        assert report.failures == [failure]

    def test_skip_outcomes_ignored(self) -> None:
        """SKIP outcomes are not recorded anywhere."""
        report = _report()

        report.record(ActionOutcome(ActionType.SKIP, "/srv/a.txt", 10, succeeded=True))

        assert report.summary()["quarantined"] == 0
        assert report.failures == []

    def test_concurrent_recording(self) -> None:
        """Outcomes recorded from many threads are all kept."""
        report = _report()

        def _worker() -> None:
            for _ in range(200):
                report.record(_ok(ActionType.QUARANTINE, 1))
                report.note_scanned()

        threads = [threading.Thread(target=_worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert report.count_quarantined == 1600
        assert report.files_scanned == 1600

    def test_finalize(self) -> None:
        """finalize stamps the time and the cancellation flag."""
        report = _report()
        assert report.generated_at is None

        report.finalize(cancelled=True)

        assert report.generated_at is not None
        assert report.cancelled is True

    def test_to_dict(self) -> None:
        """The JSON form carries metadata, summary and outcome lists."""
        report = _report(scan_roots=(Path("/srv"),))
        report.record(_ok(ActionType.DELETE, 50))
        report.finalize()

        data = report.to_dict()

        assert data["metadata"]["scan_roots"] == ["/srv"]
        assert data["metadata"]["generated_at"] is not None
        assert data["summary"]["deleted_bytes"] == 50
        assert data["deleted"][0]["action"] == "delete"
        assert data["quarantined"] == []
