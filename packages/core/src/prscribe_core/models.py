"""Records passed between the pipeline stages.

None of these are persisted: a ChangeRecord lives until the analysis engine
has rendered it into the prompt, an AnalysisResult until the comment has been
finalized.
"""

from __future__ import annotations

from dataclasses import dataclass, field

FALLBACK_SUMMARY = "Unable to analyze the changes in this pull request."
UNKNOWN_FILE = "Unknown file"


@dataclass(frozen=True)
class ChangeRecord:
    """One changed file in a pull request."""

    filename: str
    status: str  # "added" | "modified" | "removed" | "renamed" | ... (host enumeration)
    patch: str = ""
    additions: int = 0
    deletions: int = 0
    content: str | None = None  # None when removed, not code, or not retrievable


@dataclass
class FileNote:
    path: str
    note: str = ""
    risk_level: str = ""


@dataclass
class AnalysisResult:
    """Structured outcome of one review cycle.

    Every field is always populated: optional narrative sections default to
    an empty string so the formatter can omit them without checking for None.
    """

    summary: str
    file_notes: list[FileNote] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    flow_impact: str = ""
    performance_impact: str = ""
    testing_recommendations: str = ""
    test_checklist: str = ""
    is_fallback: bool = False


@dataclass
class ReviewComment:
    """The single comment the pipeline owns on a pull request."""

    id: int
    issue_number: int
    body: str


def fallback_result() -> AnalysisResult:
    """Return the whole-record fallback used when the model output cannot be trusted."""
    return AnalysisResult(
        summary=FALLBACK_SUMMARY,
        flow_impact="Unable to assess the impact on the main flows.",
        performance_impact="Unable to assess the performance impact.",
        testing_recommendations="Unable to produce testing recommendations.",
        test_checklist="Unable to generate a test checklist.",
        is_fallback=True,
    )
