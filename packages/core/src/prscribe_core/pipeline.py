"""Per-event review orchestration.

    event → open_placeholder → collect → analyze → finalize

The whole sequence runs inside one failure boundary: nothing raised while
reviewing a pull request escapes to the webhook transport, which would
otherwise answer 500 and have the delivery retried.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from prscribe_core.analysis import AnalysisEngine
from prscribe_core.collector import collect
from prscribe_core.comments import CommentManager
from prscribe_core.config import load_guidelines
from prscribe_core.events import PullRequestEvent
from prscribe_core.gh.pull_request import GitHubHost, get_github
from prscribe_core.providers.base import get_provider

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Something went wrong while reviewing this pull request, so no review was produced."


def should_review(event_type: str | None, payload) -> tuple[PullRequestEvent | None, str]:
    """Apply the trigger filter without touching GitHub.

    Returns the validated event and an empty reason when a review should
    run, otherwise None and the reason the event is ignored.
    """
    if event_type != "pull_request":
        return None, f"event is '{event_type}', not 'pull_request'"
    if not isinstance(payload, dict):
        return None, "payload is not a JSON object"
    action = payload.get("action")
    if action != "opened":
        return None, f"action is '{action}', not 'opened'"
    try:
        return PullRequestEvent.model_validate(payload), ""
    except ValidationError as e:
        logger.warning("Ignoring malformed pull_request payload: %d validation error(s)", e.error_count())
        return None, "payload is missing required pull request fields"


class ReviewPipeline:
    def __init__(self, host, engine: AnalysisEngine, comments: CommentManager):
        self.host = host
        self.engine = engine
        self.comments = comments

    @classmethod
    def from_config(cls, config: dict) -> ReviewPipeline:
        host = GitHubHost(get_github(config))
        engine = AnalysisEngine(
            provider=get_provider(config),
            guidelines=load_guidelines(config),
            max_chars_per_file=config.get("max_chars_per_file", 20000),
        )
        comments = CommentManager(host, config["placeholder_message"], config.get("heading", "PR Review"))
        return cls(host, engine, comments)

    async def on_pull_request_opened(self, event: PullRequestEvent) -> None:
        owner, repo, number = event.owner, event.repo, event.number
        comment = None
        try:
            comment = await self.comments.open_placeholder(owner, repo, number)
            records, commit_messages = await collect(self.host, owner, repo, number, event.head_sha)
            result = await self.engine.analyze(event.title, records, commit_messages)
            await self.comments.finalize(owner, repo, comment, result)
            logger.info(
                "Submitted code review for %s%s",
                event.label,
                " (fallback)" if result.is_fallback else "",
            )
        except Exception:
            logger.exception("Failed to handle 'pull_request' opened event for %s", event.label)
            if comment is not None:
                await self._mark_failed(owner, repo, comment, event.label)

    async def _mark_failed(self, owner: str, repo: str, comment, label: str) -> None:
        try:
            await self.comments.fail(owner, repo, comment, FAILURE_MESSAGE)
        except Exception as e:
            logger.error("Could not update placeholder comment %s on %s: %s", comment.id, label, e)

    async def handle_event(self, event_type: str | None, payload, schedule=None) -> dict:
        """Filter an event and start a review when it qualifies.

        With ``schedule`` (e.g. ``BackgroundTasks.add_task``) the review is
        handed off and this returns immediately; otherwise it runs inline.
        """
        event, reason = should_review(event_type, payload)
        if event is None:
            logger.debug("Ignoring %s event: %s", event_type, reason)
            return {"status": "ignored", "reason": reason}

        logger.info("PR review triggered: %s", event.label)
        if schedule is not None:
            schedule(self.on_pull_request_opened, event)
            return {"status": "processing", "pr": event.label, "action": "review"}
        await self.on_pull_request_opened(event)
        return {"status": "processed", "pr": event.label}
