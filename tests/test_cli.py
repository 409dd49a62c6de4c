from contextlib import contextmanager
from datetime import datetime, timezone

import pytest
from typer.testing import CliRunner

from feedpipe.cli import run as run_module
from feedpipe.cli.app import app
from feedpipe.config import Config, ConfigModel, save_config
from feedpipe.models import BatchStatus
from feedpipe.pipeline import BatchSummary, FeedOutcome

NOW = datetime(2025, 1, 10, 9, 0, tzinfo=timezone.utc)

runner = CliRunner()


def outcome(feed_id, status, error=None):
    return FeedOutcome(
        feed_id=feed_id,
        feed_name=f"Feed {feed_id}",
        status=status,
        items_fetched=2,
        items_created=2 if status is BatchStatus.SUCCESS else 0,
        error=error,
        started_at=NOW,
        finished_at=NOW,
    )


@pytest.fixture
def patched_run(monkeypatch, tmp_path):
    path = tmp_path / "config.yaml"
    save_config(ConfigModel(), path)
    calls = {}

    @contextmanager
    def fake_connection(db_config):
        yield object()

    class FakeOrchestrator:
        summary = None

        def __init__(self, conn, config):
            calls["config"] = config

        def run_batch(self, feed_ids=None):
            calls["feed_ids"] = feed_ids
            return FakeOrchestrator.summary

    monkeypatch.setattr(run_module, "load_context", lambda ctx: Config(path))
    monkeypatch.setattr(run_module, "get_connection", fake_connection)
    monkeypatch.setattr(run_module, "BatchOrchestrator", FakeOrchestrator)
    return FakeOrchestrator, calls


def test_run_succeeds_when_all_feeds_succeed(patched_run):
    orchestrator, calls = patched_run
    orchestrator.summary = BatchSummary(
        started_at=NOW, finished_at=NOW, outcomes=[outcome(1, BatchStatus.SUCCESS)]
    )

    result = runner.invoke(app, ["run"])

    assert result.exit_code == 0, result.output
    assert "completed" in result.output
    assert calls["feed_ids"] is None


def test_run_exits_nonzero_on_partial_failure(patched_run):
    orchestrator, calls = patched_run
    orchestrator.summary = BatchSummary(
        started_at=NOW,
        finished_at=NOW,
        outcomes=[
            outcome(1, BatchStatus.SUCCESS),
            outcome(2, BatchStatus.FAILED, "Feed fetch timed out"),
        ],
    )

    result = runner.invoke(app, ["run", "--feed-id", "1", "--feed-id", "2"])

    assert result.exit_code == 1
    assert "partial_failure" in result.output
    assert calls["feed_ids"] == [1, 2]
