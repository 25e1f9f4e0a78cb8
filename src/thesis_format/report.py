# Copyright 2026 Justin Cook
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Terminal rendering of an analysis result.
"""

from collections import Counter
from typing import Dict

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from thesis_format.models import AnalysisResult, Severity

SEVERITY_STYLES = {
    Severity.CRITICAL: "bold red",
    Severity.WARNING: "yellow",
    Severity.INFO: "cyan",
}

SEVERITY_LABELS = {
    Severity.CRITICAL: "严重",
    Severity.WARNING: "警告",
    Severity.INFO: "提示",
}

def issue_counts(result: AnalysisResult) -> Dict[Severity, int]:
    """Number of issues per severity, every severity present (possibly 0)."""
    counts = Counter(issue.severity for issue in result.issues)
    return {severity: counts.get(severity, 0) for severity in Severity}

def _score_style(score: int) -> str:
    if score >= 80:
        return "bold green"
    if score >= 60:
        return "bold yellow"
    return "bold red"

def render_analysis(result: AnalysisResult, console: Console):
    counts = issue_counts(result)
    breakdown = "  ".join(
        f"[{SEVERITY_STYLES[s]}]{SEVERITY_LABELS[s]} {n}[/]" for s, n in counts.items()
    )

    console.print(Panel(
        f"[{_score_style(result.score)}]{result.score}[/] / 100\n\n{escape(result.summary)}\n\n{breakdown}",
        title="格式分析报告",
        expand=False,
    ))

    if not result.issues:
        console.print("[green]未发现格式问题。[/]")
        return

    table = Table(show_lines=True)
    table.add_column("类型")
    table.add_column("级别")
    table.add_column("问题描述")
    table.add_column("原文")
    table.add_column("修改建议")
    table.add_column("位置")

    for issue in result.issues:
        table.add_row(
            issue.type.value,
            f"[{SEVERITY_STYLES[issue.severity]}]{SEVERITY_LABELS[issue.severity]}[/]",
            escape(issue.description),
            escape(issue.original_text),
            escape(issue.suggestion),
            escape(issue.location or ""),
        )

    console.print(table)
