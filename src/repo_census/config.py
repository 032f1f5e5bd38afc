"""Runtime configuration sourced from the environment or a .env file."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

ENV_ORGANIZATION = "ORGANIZATION_NAME"
ENV_TOKEN = "ACCESS_TOKEN"
ENV_TOKEN_FALLBACK = "GITHUB_TOKEN"
ENV_OUTPUT_FILE = "OUTPUT_FILE"
ENV_API_URL = "GITHUB_API_URL"


@dataclass(frozen=True)
class Config:
    organization: str
    token: str
    output_file: str
    api_url: str | None = None
    concurrency: int = 1
    verify_ssl: bool = True

    def __post_init__(self) -> None:
        if self.concurrency < 1:
            raise ValueError("concurrency must be at least 1")

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        concurrency: int = 1,
        verify_ssl: bool = True,
    ) -> Config:
        """Build a Config from environment variables.

        Raises ValueError listing every required variable that is unset.
        """
        if env is None:
            env = os.environ
        organization = env.get(ENV_ORGANIZATION, "")
        token = env.get(ENV_TOKEN) or env.get(ENV_TOKEN_FALLBACK, "")
        output_file = env.get(ENV_OUTPUT_FILE, "")

        missing = [
            name
            for name, value in (
                (ENV_ORGANIZATION, organization),
                (ENV_TOKEN, token),
                (ENV_OUTPUT_FILE, output_file),
            )
            if not value
        ]
        if missing:
            raise ValueError(
                f"Missing required environment variable(s): {', '.join(missing)}"
            )
        return cls(
            organization=organization,
            token=token,
            output_file=output_file,
            api_url=env.get(ENV_API_URL) or None,
            concurrency=concurrency,
            verify_ssl=verify_ssl,
        )
