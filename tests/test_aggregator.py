"""Tests for the aggregator module."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from repo_census.aggregator import (
    _last_commit_date,
    collect_records,
    fetch_repository_record,
    list_repositories,
)
from repo_census.github.client import GitHubClient
from repo_census.models import RepositoryRecord, RepositoryRef

from .conftest import make_commit, make_repo_item


def _http_error(status: int) -> httpx.HTTPStatusError:
    response = MagicMock(spec=httpx.Response)
    response.status_code = status
    return httpx.HTTPStatusError(str(status), request=MagicMock(), response=response)


@pytest.fixture
def mock_client():
    client = AsyncMock(spec=GitHubClient)
    client.list_org_repos.return_value = [
        make_repo_item("org", "repo1"),
        make_repo_item("org", "repo2"),
        make_repo_item("org", "repo3"),
    ]
    metadata = {
        "repo1": {"size": 1024, "language": "Python"},
        "repo2": {"size": 512, "language": None},
        "repo3": {"size": 0, "language": "Go"},
    }
    client.get_repo.side_effect = lambda owner, name: metadata[name]
    client.list_commits.return_value = [make_commit("2024-06-03T10:30:00Z")]
    return client


@pytest.mark.asyncio
async def test_list_repositories_keeps_order(mock_client):
    refs = await list_repositories(mock_client, "org")
    assert refs == [
        RepositoryRef("org", "repo1"),
        RepositoryRef("org", "repo2"),
        RepositoryRef("org", "repo3"),
    ]
    mock_client.list_org_repos.assert_awaited_once_with("org")


@pytest.mark.asyncio
async def test_list_repositories_uses_owner_login():
    client = AsyncMock(spec=GitHubClient)
    client.list_org_repos.return_value = [make_repo_item("someone-else", "fork")]
    refs = await list_repositories(client, "org")
    assert refs[0].full_name == "someone-else/fork"


@pytest.mark.asyncio
async def test_fetch_repository_record(mock_client, reporter):
    record = await fetch_repository_record(
        mock_client, RepositoryRef("org", "repo1"), reporter
    )
    assert record == RepositoryRecord(
        repository="org/repo1",
        total_lines=1024,
        last_commit_date="2024-06-03T10:30:00Z",
        language="Python",
    )
    assert reporter.completed == 1
    assert reporter.messages == [
        "Total lines of code in org/repo1: 1024",
        "Last commit date in org/repo1: 2024-06-03T10:30:00Z",
        "Language in org/repo1: Python",
    ]


@pytest.mark.asyncio
async def test_fetch_null_language_becomes_empty(mock_client):
    record = await fetch_repository_record(mock_client, RepositoryRef("org", "repo2"))
    assert record.language == ""


@pytest.mark.asyncio
async def test_fetch_empty_commit_list_is_na(mock_client):
    mock_client.list_commits.return_value = []
    record = await fetch_repository_record(mock_client, RepositoryRef("org", "repo1"))
    assert record.last_commit_date == "N/A"
    assert record.total_lines == 1024


@pytest.mark.asyncio
async def test_fetch_detail_error_degrades(mock_client, reporter, caplog):
    mock_client.get_repo.side_effect = _http_error(500)

    with caplog.at_level("WARNING"):
        record = await fetch_repository_record(
            mock_client, RepositoryRef("org", "repo1"), reporter
        )

    assert record == RepositoryRecord("org/repo1", 0, "", "")
    assert reporter.completed == 1
    assert reporter.messages == []
    assert "org/repo1" in caplog.text


@pytest.mark.asyncio
async def test_fetch_commit_error_degrades(mock_client, reporter):
    mock_client.list_commits.side_effect = httpx.ConnectError("boom")

    record = await fetch_repository_record(
        mock_client, RepositoryRef("org", "repo1"), reporter
    )

    assert record == RepositoryRecord("org/repo1", 0, "", "")
    assert reporter.completed == 1


def test_last_commit_date_variants():
    assert _last_commit_date([make_commit("2024-01-01T00:00:00Z")]) == "2024-01-01T00:00:00Z"
    assert _last_commit_date([]) == "N/A"
    assert _last_commit_date(None) == "N/A"
    assert _last_commit_date({"commit": {}}) == "N/A"
    assert _last_commit_date([{"sha": "x"}]) == "N/A"
    assert _last_commit_date([{"commit": {"committer": None}}]) == "N/A"
    assert _last_commit_date([{"commit": {"committer": {"date": None}}}]) == "N/A"


@pytest.mark.asyncio
async def test_collect_records(mock_client, reporter):
    records = await collect_records(mock_client, "org", reporter=reporter)

    assert [r.repository for r in records] == ["org/repo1", "org/repo2", "org/repo3"]
    assert [r.total_lines for r in records] == [1024, 512, 0]
    assert reporter.events[0] == ("start", None)
    assert reporter.events[1] == ("set_total", 3)
    assert reporter.events[-1] == ("stop",)
    assert reporter.completed == 3


@pytest.mark.asyncio
async def test_collect_records_empty_org(reporter):
    client = AsyncMock(spec=GitHubClient)
    client.list_org_repos.return_value = []

    records = await collect_records(client, "org", reporter=reporter)

    assert records == []
    assert reporter.total == 0
    client.get_repo.assert_not_awaited()


@pytest.mark.asyncio
async def test_collect_records_one_failure_keeps_others(mock_client, reporter):
    def get_repo(owner, name):
        if name == "repo2":
            raise _http_error(404)
        return {"size": 7, "language": "Rust"}

    mock_client.get_repo.side_effect = get_repo

    records = await collect_records(mock_client, "org", reporter=reporter)

    assert len(records) == 3
    assert records[1] == RepositoryRecord("org/repo2", 0, "", "")
    assert records[0].total_lines == 7
    assert records[2].language == "Rust"
    assert reporter.completed == 3


@pytest.mark.asyncio
async def test_collect_records_listing_failure_propagates(reporter):
    client = AsyncMock(spec=GitHubClient)
    client.list_org_repos.side_effect = _http_error(401)

    with pytest.raises(httpx.HTTPStatusError):
        await collect_records(client, "org", reporter=reporter)

    assert reporter.events[-1] == ("stop",)
    client.get_repo.assert_not_awaited()


@pytest.mark.asyncio
async def test_collect_records_sequential(mock_client):
    """With concurrency 1 a repo is fully fetched before the next starts."""
    calls: list[str] = []

    async def get_repo(owner, name):
        calls.append(f"repo:{name}")
        await asyncio.sleep(0)
        return {"size": 1, "language": "C"}

    async def list_commits(owner, name):
        calls.append(f"commits:{name}")
        await asyncio.sleep(0)
        return []

    mock_client.get_repo.side_effect = get_repo
    mock_client.list_commits.side_effect = list_commits

    await collect_records(mock_client, "org")

    assert calls == [
        "repo:repo1", "commits:repo1",
        "repo:repo2", "commits:repo2",
        "repo:repo3", "commits:repo3",
    ]


@pytest.mark.asyncio
async def test_collect_records_concurrent_keeps_listing_order(mock_client):
    delays = {"repo1": 0.03, "repo2": 0.0, "repo3": 0.01}

    async def get_repo(owner, name):
        await asyncio.sleep(delays[name])
        return {"size": len(name), "language": name}

    mock_client.get_repo.side_effect = get_repo

    records = await collect_records(mock_client, "org", concurrency=3)

    assert [r.repository for r in records] == ["org/repo1", "org/repo2", "org/repo3"]
    assert [r.language for r in records] == ["repo1", "repo2", "repo3"]
