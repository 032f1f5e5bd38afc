"""CLI entrypoint for repo-census."""

from __future__ import annotations

import asyncio
import logging
import os
import sys

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .config import (
    ENV_API_URL,
    ENV_ORGANIZATION,
    ENV_OUTPUT_FILE,
    ENV_TOKEN,
    ENV_TOKEN_FALLBACK,
    Config,
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def _resolve_config(
    organization: str | None,
    token: str | None,
    output_file: str | None,
    api_url: str | None,
    concurrency: int,
    verify_ssl: bool,
) -> Config:
    """Command-line values take precedence over the environment."""
    env = dict(os.environ)
    for name, value in (
        (ENV_ORGANIZATION, organization),
        (ENV_TOKEN, token),
        (ENV_OUTPUT_FILE, output_file),
        (ENV_API_URL, api_url),
    ):
        if value:
            env[name] = value
    try:
        return Config.from_env(env, concurrency=concurrency, verify_ssl=verify_ssl)
    except ValueError as exc:
        raise click.UsageError(
            f"{exc}. Pass --org, --token and --output or set them in the environment."
        ) from exc


@click.command()
@click.option(
    "--org",
    "organization",
    default=None,
    help=f"GitHub organization to inventory [env var: {ENV_ORGANIZATION}]",
)
@click.option(
    "--token",
    default=None,
    help=f"GitHub access token [env var: {ENV_TOKEN}, {ENV_TOKEN_FALLBACK}]",
)
@click.option(
    "--output",
    "output_file",
    default=None,
    type=click.Path(dir_okay=False),
    help=(
        "Output file; .csv or .html selects the format "
        f"[env var: {ENV_OUTPUT_FILE}]"
    ),
)
@click.option(
    "--api-url",
    default=None,
    help=f"GitHub Enterprise API base URL [env var: {ENV_API_URL}]",
)
@click.option(
    "--concurrency",
    default=1,
    show_default=True,
    type=click.IntRange(min=1),
    help="Repositories fetched at once",
)
@click.option(
    "--no-ssl-verify",
    is_flag=True,
    default=False,
    help="Disable SSL verification (self-signed certs)",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Debug logging")
@click.version_option(version=__version__)
def main(
    organization: str | None,
    token: str | None,
    output_file: str | None,
    api_url: str | None,
    concurrency: int,
    no_ssl_verify: bool,
    verbose: bool,
) -> None:
    """Inventory every repository of a GitHub organization.

    \b
    Writes repository, size, last commit date and language for each
    repository to a CSV file or an HTML report with charts.

    \b
    Examples:
      repo-census --org myorg --output repos.csv
      ORGANIZATION_NAME=myorg OUTPUT_FILE=report.html repo-census
    """
    _configure_logging(verbose)
    config = _resolve_config(
        organization,
        token,
        output_file,
        api_url,
        concurrency=concurrency,
        verify_ssl=not no_ssl_verify,
    )

    from .orchestrator import run

    try:
        asyncio.run(run(config))
    except Exception as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


def entrypoint() -> None:
    """Console script: load .env before click reads the environment."""
    load_dotenv()
    main()


if __name__ == "__main__":  # pragma: no cover
    entrypoint()
