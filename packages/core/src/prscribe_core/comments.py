"""Lifecycle of the one comment the bot owns per pull request.

The comment is created with a placeholder before any slow work starts, then
overwritten exactly once: with the rendered review, or with a failure notice.
It is never deleted and no second comment is posted for the same event.
"""

from __future__ import annotations

import asyncio
import logging

from prscribe_core.formatter import format_failure, format_review
from prscribe_core.models import AnalysisResult, ReviewComment

logger = logging.getLogger(__name__)


class CommentManager:
    def __init__(self, host, placeholder_message: str, heading: str = "PR Review"):
        self.host = host
        self.placeholder_message = placeholder_message
        self.heading = heading

    async def open_placeholder(self, owner: str, repo: str, pull_number: int) -> ReviewComment:
        comment_id = await asyncio.to_thread(
            self.host.create_comment, owner, repo, pull_number, self.placeholder_message
        )
        logger.info("Posted placeholder comment %s on %s/%s#%d", comment_id, owner, repo, pull_number)
        return ReviewComment(id=comment_id, issue_number=pull_number, body=self.placeholder_message)

    async def _overwrite(self, owner: str, repo: str, comment: ReviewComment, body: str) -> ReviewComment:
        await asyncio.to_thread(self.host.update_comment, owner, repo, comment.issue_number, comment.id, body)
        comment.body = body
        return comment

    async def finalize(self, owner: str, repo: str, comment: ReviewComment, result: AnalysisResult) -> ReviewComment:
        return await self._overwrite(owner, repo, comment, format_review(result, self.heading))

    async def fail(self, owner: str, repo: str, comment: ReviewComment, message: str) -> ReviewComment:
        return await self._overwrite(owner, repo, comment, format_failure(message, self.heading))
