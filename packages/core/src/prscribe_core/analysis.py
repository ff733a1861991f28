"""Prompt construction and the single model call behind each review."""

from __future__ import annotations

import asyncio
import logging

from prscribe_core.models import AnalysisResult, ChangeRecord, fallback_result
from prscribe_core.parser import parse

logger = logging.getLogger(__name__)

CONTENT_NOT_AVAILABLE = "N/A (content not available)"
_TRUNCATED = "\n[... truncated]"

_OUTPUT_SCHEMA = """<review>
  <summary>One paragraph summarising the changes and their likely impact</summary>
  <flowImpact>Optional: impact on the main user-facing flows</flowImpact>
  <performanceImpact>Optional: potential performance problems</performanceImpact>
  <fileAnalyses>
    <file>
      <path>path/of/the/file</path>
      <analysis>Review of this file in regular paragraphs, not code blocks</analysis>
      <riskLevel>High|Medium|Low, with a short justification</riskLevel>
    </file>
  </fileAnalyses>
  <overallSuggestions>
    <suggestion>One suggestion per element, on a single line</suggestion>
  </overallSuggestions>
  <testingRecommendations>Optional: how to test these changes before deploying</testingRecommendations>
  <testChecklist>Optional: a markdown checklist using "- [ ]" items grouped under "### Section" titles</testChecklist>
</review>"""


def _truncate(text: str, max_chars: int) -> str:
    if max_chars and len(text) > max_chars:
        return text[:max_chars] + _TRUNCATED
    return text


def _render_file(record: ChangeRecord, max_chars: int) -> str:
    content = _truncate(record.content, max_chars) if record.content is not None else CONTENT_NOT_AVAILABLE
    return f"""File: {record.filename}
Status: {record.status} (+{record.additions}/-{record.deletions})
Diff:
{_truncate(record.patch, max_chars) or "(no textual diff)"}
Current Content:
{content}"""


def build_prompt(
    title: str,
    change_records: list[ChangeRecord],
    commit_messages: list[str],
    guidelines: str = "",
    max_chars_per_file: int = 0,
) -> str:
    commits = "\n".join(f"- {msg.strip()}" for msg in commit_messages) or "- (none)"
    files = "\n---\n".join(_render_file(r, max_chars_per_file) for r in change_records) or "(no files changed)"
    return f"""You are an expert code reviewer focused on preventing problems before they reach production.
Review the pull request below.

{guidelines.strip()}

Write your analysis in clear, concise paragraphs. Do not use code blocks for regular text.
Write every suggestion as a single line.
Be very careful with the XML: it must be well formed, escape "&" and "<" inside text,
and it must follow the structure below exactly. Optional elements may be omitted.

Context:
PR Title: {title}
Commit Messages:
{commits}

Changed Files:
{files}

Provide your review in the following XML format:
{_OUTPUT_SCHEMA}
"""


class AnalysisEngine:
    """Turns a collected change set into an AnalysisResult with one model call."""

    def __init__(self, provider, guidelines: str = "", max_chars_per_file: int = 20000):
        self.provider = provider
        self.guidelines = guidelines
        self.max_chars_per_file = max_chars_per_file

    async def analyze(
        self, title: str, change_records: list[ChangeRecord], commit_messages: list[str]
    ) -> AnalysisResult:
        """Return the parsed review, or the fallback record if the model call fails."""
        prompt = build_prompt(title, change_records, commit_messages, self.guidelines, self.max_chars_per_file)
        try:
            text = await asyncio.to_thread(self.provider.generate, prompt)
        except Exception as e:
            logger.error("%s call failed: %s", self.provider.__class__.__name__, e)
            return fallback_result()
        return parse(text)
