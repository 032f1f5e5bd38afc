"""Shared test fixtures."""

from __future__ import annotations

import pytest


class RecordingReporter:
    """ProgressReporter that remembers every call."""

    def __init__(self) -> None:
        self.events: list[tuple] = []
        self.messages: list[str] = []
        self.total: int | None = None
        self.completed = 0

    def start(self, total: int | None = None) -> None:
        self.events.append(("start", total))
        self.total = total

    def set_total(self, total: int) -> None:
        self.events.append(("set_total", total))
        self.total = total

    def advance(self, step: int = 1) -> None:
        self.events.append(("advance", step))
        self.completed += step

    def log(self, message: str) -> None:
        self.messages.append(message)

    def stop(self) -> None:
        self.events.append(("stop",))


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


def make_repo_item(owner: str, name: str) -> dict:
    return {"name": name, "full_name": f"{owner}/{name}", "owner": {"login": owner}}


def make_commit(date: str) -> dict:
    return {
        "sha": "abc123",
        "commit": {
            "author": {"date": "2000-01-01T00:00:00Z"},
            "committer": {"date": date},
            "message": "fix: something",
        },
    }
