"""Data models for repo-census."""

from __future__ import annotations

from dataclasses import dataclass

CSV_FIELDS = ("repository", "totalLines", "lastCommitDate", "language")

NO_COMMITS = "N/A"


@dataclass(frozen=True)
class RepositoryRef:
    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class RepositoryRecord:
    """One row of the report.

    ``last_commit_date`` is an ISO 8601 timestamp, ``"N/A"`` when the
    repository has no commits, or ``""`` when fetching its details failed.
    """

    repository: str
    total_lines: int = 0
    last_commit_date: str = ""
    language: str = ""

    @classmethod
    def degraded(cls, ref: RepositoryRef) -> RepositoryRecord:
        return cls(repository=ref.full_name)

    def csv_row(self) -> list[str | int]:
        return [self.repository, self.total_lines, self.last_commit_date, self.language]


@dataclass
class ChartSlice:
    label: str
    count: int
    color: str
