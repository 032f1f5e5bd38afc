"""Orchestrator: wires together client, aggregator, and renderer."""

from __future__ import annotations

import logging

import httpx
from rich.console import Console

from .aggregator import collect_records
from .config import Config
from .github.client import GitHubClient
from .progress import ProgressReporter, RichProgressReporter
from .renderer import render_output

logger = logging.getLogger(__name__)


def describe_http_error(exc: httpx.HTTPError, org: str) -> str:
    """Turn a listing failure into a message a user can act on."""
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        if status == 404:
            return f"organization '{org}' not found"
        if status in (401, 403):
            return "authentication failed, check the access token"
        return f"GitHub API returned {status}"
    return str(exc) or type(exc).__name__


async def run(
    config: Config,
    client: GitHubClient | None = None,
    reporter: ProgressReporter | None = None,
    console: Console | None = None,
) -> str | None:
    """Main pipeline: list repos, fetch details, render.

    Returns the written output path, or None when nothing was written.
    """
    console = console or Console()
    if reporter is None:
        reporter = RichProgressReporter(console=console)
    if client is None:
        client = GitHubClient(
            token=config.token, base_url=config.api_url, verify_ssl=config.verify_ssl
        )

    async with client:
        try:
            records = await collect_records(
                client,
                config.organization,
                reporter=reporter,
                concurrency=config.concurrency,
            )
        except httpx.HTTPError as exc:
            logger.error(
                "Error occurred while retrieving organization repositories: %s",
                describe_http_error(exc, config.organization),
            )
            return None
        except Exception as exc:
            logger.error(
                "Error occurred while retrieving organization repositories: %s: %s",
                type(exc).__name__,
                exc,
            )
            return None

    console.print(
        f"Retrieved details for all repositories of {config.organization}",
        markup=False,
    )
    if render_output(records, config.output_file, console=console):
        return config.output_file
    return None
