"""Tests for progress reporting."""

from __future__ import annotations

import pytest

from polytile.progress import ProgressReporter, should_report


@pytest.mark.parametrize("count", [1, 2, 9, 10, 20, 90, 100, 300, 1000, 10000, 100000, 200000, 1000000, 1100000])
def test_should_report(count):
    assert should_report(count)


@pytest.mark.parametrize("count", [0, 11, 99, 110, 1010, 15000, 150000, 1050000])
def test_should_not_report(count):
    assert not should_report(count)


class _RecordingLogger:
    def __init__(self):
        self.calls = []
        self.finished = False

    def log(self, metrics, step=None):
        self.calls.append((metrics, step))

    def finish(self):
        self.finished = True


def test_reporter_prints_on_cadence(capsys):
    reporter = ProgressReporter()
    reported = [count for count in range(1, 40) if reporter.update(count)]
    assert reported == list(range(1, 10)) + [10, 20, 30]
    assert reporter.last_reported == 30
    out = capsys.readouterr().out
    assert "[Search] 30 distinct tilings" in out
    assert "[Search] 31 distinct tilings" not in out


def test_reporter_forwards_to_logger(capsys):
    logger = _RecordingLogger()
    reporter = ProgressReporter(logger=logger, quiet=True)
    reporter.update(5)
    reporter.update(11)
    reporter.finish(total=11, raw_count=40)
    assert capsys.readouterr().out == ""
    assert logger.calls[0][1] == 5
    assert logger.calls[0][0]["search/distinct_tilings"] == 5
    assert len(logger.calls) == 2
    final = logger.calls[-1][0]
    assert final["search/total"] == 11
    assert final["search/raw_tilings"] == 40
    assert logger.finished
