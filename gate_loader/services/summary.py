from __future__ import annotations

from ..models.build_result import BuildResult, SummaryReport

"""Summary line rendering for the Gate loader CLI.

Format:
SUMMARY gates={records}/{data_rows} dropped={dropped} group1={n} group2={n}
group3={n} reverse={n} statuses={code}:{n},{code}:{n},...
"""


def render_summary_line(report: SummaryReport, result: BuildResult) -> str:
    """Render a single SUMMARY line from a report and the build it came from.

    Group counts follow the report's group order. Statuses are sorted by code
    so output is stable between runs.

    Examples:
        >>> from gate_loader.models.build_result import BuildResult, SummaryReport
        >>> report = SummaryReport(total=2, group_counts={1: 2, 2: 0, 3: 0},
        ...                        status_counts={"S": 1, "R": 1}, reverse_count=1)
        >>> render_summary_line(report, BuildResult(records=(), data_rows=2))
        'SUMMARY gates=2/2 dropped=0 group1=2 group2=0 group3=0 reverse=1 statuses=R:1,S:1'
    """
    groups = " ".join(f"group{g}={n}" for g, n in report.group_counts.items())
    statuses = ",".join(f"{code}:{n}" for code, n in sorted(report.status_counts.items()))
    return (
        f"SUMMARY gates={report.total}/{result.data_rows} "
        f"dropped={len(result.dropped_rows)} "
        f"{groups} "
        f"reverse={report.reverse_count} "
        f"statuses={statuses or '-'}"
    )
