"""Data aggregation: list an organization's repos and collect one record per repo."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from .github.client import GitHubClient
from .models import NO_COMMITS, RepositoryRecord, RepositoryRef
from .progress import NullProgressReporter, ProgressReporter

logger = logging.getLogger(__name__)


def _repository_ref(item: dict[str, Any]) -> RepositoryRef:
    return RepositoryRef(owner=item["owner"]["login"], name=item["name"])


def _last_commit_date(commits: Any) -> str:
    """Committer date of the newest commit, or ``N/A`` when there is none."""
    if not isinstance(commits, list) or not commits:
        return NO_COMMITS
    try:
        date = commits[0]["commit"]["committer"]["date"]
    except (KeyError, TypeError):
        return NO_COMMITS
    return date if isinstance(date, str) and date else NO_COMMITS


async def list_repositories(client: GitHubClient, org: str) -> list[RepositoryRef]:
    """List every repository of ``org`` in listing order.

    Errors propagate: without the listing there is nothing to report.
    """
    items = await client.list_org_repos(org)
    return [_repository_ref(item) for item in items]


async def fetch_repository_record(
    client: GitHubClient,
    ref: RepositoryRef,
    reporter: ProgressReporter | None = None,
) -> RepositoryRecord:
    """Fetch size, language and last commit date for one repository.

    Never raises: any failure yields a record with zero/empty fields.
    """
    reporter = reporter or NullProgressReporter()
    try:
        metadata = await client.get_repo(ref.owner, ref.name)
        commits = await client.list_commits(ref.owner, ref.name)
        record = RepositoryRecord(
            repository=ref.full_name,
            total_lines=int(metadata.get("size") or 0),
            last_commit_date=_last_commit_date(commits),
            language=metadata.get("language") or "",
        )
    except Exception as exc:
        logger.warning(
            "Error occurred while retrieving details for %s: %s", ref.full_name, exc
        )
        record = RepositoryRecord.degraded(ref)
    else:
        reporter.log(f"Total lines of code in {ref.full_name}: {record.total_lines}")
        reporter.log(f"Last commit date in {ref.full_name}: {record.last_commit_date}")
        reporter.log(f"Language in {ref.full_name}: {record.language}")
    finally:
        reporter.advance()
    return record


async def collect_records(
    client: GitHubClient,
    org: str,
    reporter: ProgressReporter | None = None,
    concurrency: int = 1,
) -> list[RepositoryRecord]:
    """List the organization's repos and fetch a record for each.

    With ``concurrency == 1`` each repository is fetched only after the
    previous one finished. Larger values fetch through a bounded pool; the
    result keeps listing order either way.
    """
    reporter = reporter or NullProgressReporter()
    reporter.start()
    try:
        refs = await list_repositories(client, org)
        reporter.set_total(len(refs))
        logger.debug("Found %d repositories in %s", len(refs), org)

        if concurrency <= 1:
            records: list[RepositoryRecord] = []
            for ref in refs:
                records.append(await fetch_repository_record(client, ref, reporter))
            return records

        semaphore = asyncio.Semaphore(concurrency)

        async def bounded_fetch(ref: RepositoryRef) -> RepositoryRecord:
            async with semaphore:
                return await fetch_repository_record(client, ref, reporter)

        return list(await asyncio.gather(*(bounded_fetch(ref) for ref in refs)))
    finally:
        reporter.stop()
