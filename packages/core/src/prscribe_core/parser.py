"""Lenient extraction of the ``<review>`` block from model output.

The model is only asked to emulate XML; nothing guarantees it does. ``parse``
therefore never raises: missing markers, malformed markup and a missing
summary all collapse to ``fallback_result()``, and missing optional fields
collapse to empty values.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET

from prscribe_core.models import UNKNOWN_FILE, AnalysisResult, FileNote, fallback_result

logger = logging.getLogger(__name__)

OPEN_MARKER = "<review>"
CLOSE_MARKER = "</review>"

_SCHEMA_TAGS = (
    "review",
    "summary",
    "flowImpact",
    "performanceImpact",
    "fileAnalyses",
    "file",
    "path",
    "analysis",
    "riskLevel",
    "overallSuggestions",
    "suggestion",
    "testingRecommendations",
    "testChecklist",
)

# "&" not starting one of the five XML entities or a character reference;
# models write "A & B" and HTML entities such as "&nbsp;" freely.
_BARE_AMPERSAND_RE = re.compile(r"&(?!(?:amp|lt|gt|quot|apos|#[0-9]+|#x[0-9A-Fa-f]+);)")
# "<" that does not open or close a schema element, e.g. "List<String>" in prose.
_STRAY_LT_RE = re.compile(r"<(?!/?(?:%s)\s*/?>)" % "|".join(_SCHEMA_TAGS))
_WHITESPACE_RE = re.compile(r"\s+")


def _escape_prose(block: str) -> str:
    return _STRAY_LT_RE.sub("&lt;", _BARE_AMPERSAND_RE.sub("&amp;", block))


def extract_review_block(raw_text: str) -> str | None:
    """Return the first ``<review>...</review>`` slice (markers included), or None."""
    start = raw_text.find(OPEN_MARKER)
    if start == -1:
        return None
    end = raw_text.find(CLOSE_MARKER, start + len(OPEN_MARKER))
    if end == -1:
        return None
    return raw_text[start : end + len(CLOSE_MARKER)]


def _text(element: ET.Element | None) -> str:
    if element is None:
        return ""
    return "".join(element.itertext()).strip()


def _file_notes(root: ET.Element) -> list[FileNote]:
    container = root.find("fileAnalyses")
    if container is None:
        return []
    notes = []
    for entry in container.findall("file"):
        # Keep entries without a path so the count matches what the model analysed.
        notes.append(
            FileNote(
                path=_text(entry.find("path")) or UNKNOWN_FILE,
                note=_text(entry.find("analysis")),
                risk_level=_text(entry.find("riskLevel")),
            )
        )
    return notes


def _suggestions(root: ET.Element) -> list[str]:
    container = root.find("overallSuggestions")
    if container is None:
        return []
    suggestions = []
    for entry in container.findall("suggestion"):
        line = _WHITESPACE_RE.sub(" ", _text(entry))
        if line:
            suggestions.append(line)
    return suggestions


def parse(raw_text: str) -> AnalysisResult:
    """Turn raw model output into an AnalysisResult. Never raises."""
    if not raw_text:
        logger.warning("Empty model response. Returning fallback.")
        return fallback_result()

    block = extract_review_block(raw_text)
    if block is None:
        logger.warning("Could not locate <review> tags in the model response. Returning fallback.")
        return fallback_result()

    try:
        root = ET.fromstring(_escape_prose(block))
    except ET.ParseError as e:
        logger.warning("Malformed review XML (%s): %s", e, block[:200])
        return fallback_result()

    summary = _text(root.find("summary"))
    if not summary:
        logger.warning("Review XML is missing the summary. Returning fallback.")
        return fallback_result()

    return AnalysisResult(
        summary=summary,
        file_notes=_file_notes(root),
        suggestions=_suggestions(root),
        flow_impact=_text(root.find("flowImpact")),
        performance_impact=_text(root.find("performanceImpact")),
        testing_recommendations=_text(root.find("testingRecommendations")),
        test_checklist=_text(root.find("testChecklist")),
    )
