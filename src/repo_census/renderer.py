"""CSV and static HTML report renderers."""

from __future__ import annotations

import csv
import html
import io
import json
import random
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from rich.console import Console

from .charts import commit_recency_distribution, language_distribution
from .models import CSV_FIELDS, ChartSlice, RepositoryRecord

INVALID_FORMAT_MESSAGE = (
    "Invalid output file format. Please provide a file with .csv or .html extension."
)

_DATATABLES_CSS = "https://cdn.jsdelivr.net/npm/simple-datatables@9.0.0/dist/style.css"
_DATATABLES_JS = "https://cdn.jsdelivr.net/npm/simple-datatables@9.0.0"
_PLOTLY_JS = "https://cdnjs.cloudflare.com/ajax/libs/plotly.js/2.26.0/plotly.min.js"


def _write_to_file(content: str, output_file: str) -> None:
    with open(output_file, "w", encoding="utf-8", newline="") as f:
        f.write(content)


def _pie_trace(slices: Sequence[ChartSlice]) -> str:
    trace = {
        "type": "pie",
        "labels": [s.label for s in slices],
        "values": [s.count for s in slices],
        "marker": {"colors": [s.color for s in slices]},
    }
    # Escape "</" so the JSON cannot close the surrounding <script> element
    return json.dumps([trace]).replace("</", "<\\/")


def build_csv(records: Sequence[RepositoryRecord]) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(CSV_FIELDS)
    for record in records:
        writer.writerow(record.csv_row())
    return output.getvalue()


def build_html(
    records: Sequence[RepositoryRecord],
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> str:
    """Build the self-contained HTML report.

    The table is enhanced by Simple-DataTables and both pie charts are drawn
    by Plotly.js; the two scripts are loaded from CDNs when the page opens.
    """
    total_repositories = len(records)
    total_lines = sum(r.total_lines for r in records)
    languages = language_distribution(records, rng=rng)
    recency = commit_recency_distribution(records, now=now, rng=rng)

    rows = "\n".join(
        "<tr>"
        f"<td>{html.escape(r.repository)}</td>"
        f"<td>{r.total_lines}</td>"
        f"<td>{html.escape(r.last_commit_date)}</td>"
        f"<td>{html.escape(r.language)}</td>"
        "</tr>"
        for r in records
    )

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>Repository Report</title>
    <link href="{_DATATABLES_CSS}" rel="stylesheet" type="text/css">
    <script src="{_PLOTLY_JS}"></script>
    <style>
        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            margin: 20px;
        }}
        table {{
            border-collapse: collapse;
            width: 100%;
        }}
        th, td {{
            padding: 8px;
            text-align: left;
            border-bottom: 1px solid #ddd;
        }}
        tfoot td {{
            font-weight: bold;
        }}
        .charts {{
            display: grid;
            grid-template-columns: repeat(auto-fit, minmax(400px, 1fr));
            gap: 20px;
            margin-top: 30px;
        }}
    </style>
</head>
<body>
    <h1>Repository Report</h1>
    <table id="repositories" class="sortable">
        <thead>
            <tr>
                <th>Repository</th>
                <th>Total Lines</th>
                <th>Last Commit Date</th>
                <th>Language</th>
            </tr>
        </thead>
        <tbody>
{rows}
        </tbody>
        <tfoot>
            <tr>
                <td colspan="4">Summary</td>
            </tr>
            <tr>
                <td>Total Repositories: <span id="total-repositories">{total_repositories}</span></td>
                <td>Total Lines of Code: <span id="total-lines">{total_lines}</span></td>
                <td colspan="2"></td>
            </tr>
        </tfoot>
    </table>
    <div class="charts">
        <div>
            <h2>Languages</h2>
            <div id="language-chart"></div>
        </div>
        <div>
            <h2>Last Commit</h2>
            <div id="commit-chart"></div>
        </div>
    </div>
    <script src="{_DATATABLES_JS}" type="text/javascript"></script>
    <script>
        document.addEventListener('DOMContentLoaded', function() {{
            new simpleDatatables.DataTable(document.getElementById('repositories'), {{
                searchable: true,
                sortable: true,
                paging: true,
                perPage: 50,
                perPageSelect: [20, 50, 100, 200]
            }});
            Plotly.newPlot('language-chart', {_pie_trace(languages)});
            Plotly.newPlot('commit-chart', {_pie_trace(recency)});
        }});
    </script>
</body>
</html>
"""


def render_csv(records: Sequence[RepositoryRecord], output_file: str) -> None:
    """Write records as CSV, overwriting ``output_file``."""
    _write_to_file(build_csv(records), output_file)


def render_html(
    records: Sequence[RepositoryRecord],
    output_file: str,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> None:
    """Write the HTML report, overwriting ``output_file``."""
    _write_to_file(build_html(records, now=now, rng=rng), output_file)


def render_output(
    records: Sequence[RepositoryRecord],
    output_file: str,
    console: Console | None = None,
) -> bool:
    """Pick the renderer from the file extension. Returns whether a file was written."""
    console = console or Console()
    suffix = Path(output_file).suffix.lower()
    if suffix == ".csv":
        render_csv(records, output_file)
    elif suffix == ".html":
        render_html(records, output_file)
    else:
        console.print(INVALID_FORMAT_MESSAGE, markup=False)
        return False
    console.print(f"Results saved to {output_file}", markup=False)
    return True
