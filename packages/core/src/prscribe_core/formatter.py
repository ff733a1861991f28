"""Markdown rendering of an AnalysisResult into the final comment body."""

from __future__ import annotations

from prscribe_core.models import AnalysisResult, FileNote


def _collapse_blank_lines(text: str) -> str:
    return "\n".join(line.strip() for line in text.splitlines() if line.strip())


def _section(title: str, body: str, level: int = 2) -> list[str]:
    body = body.strip()
    if not body:
        return []
    return [f"{'#' * level} {title}", body, ""]


def _file_section(note: FileNote) -> list[str]:
    heading = f"## {note.path}"
    if note.risk_level:
        heading += f" (Risk: {note.risk_level})"
    lines = [heading]
    body = _collapse_blank_lines(note.note)
    if body:
        lines.append(body)
    lines.append("")
    return lines


def format_review(result: AnalysisResult, heading: str = "PR Review") -> str:
    lines = [f"# {heading}", "", result.summary.strip(), ""]
    lines += _section("Flow Impact", result.flow_impact)
    lines += _section("Performance Impact", result.performance_impact)
    for note in result.file_notes:
        lines += _file_section(note)
    if result.suggestions:
        lines.append("## Suggestions")
        lines += [f"- {s.strip()}" for s in result.suggestions]
        lines.append("")
    lines += _section("Testing Recommendations", result.testing_recommendations)
    lines += _section("Test Checklist", result.test_checklist)
    return "\n".join(lines).rstrip() + "\n"


def format_failure(message: str, heading: str = "PR Review") -> str:
    return f"# {heading}\n\n{message.strip()}\n"
