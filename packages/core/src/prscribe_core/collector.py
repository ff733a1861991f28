"""Change-set collection for a single pull request.

One call lists the files, one call lists the commits, and every file that
still exists at the head ref has its content fetched in its own worker
thread. A failed content fetch only blanks that file's content; the record
itself is always returned, so the result is exactly as long as the file list.
"""

from __future__ import annotations

import asyncio
import logging

from prscribe_core.models import ChangeRecord

logger = logging.getLogger(__name__)


async def _fetch_content(host, owner: str, repo: str, path: str, ref: str) -> str | None:
    try:
        return await asyncio.to_thread(host.get_content, owner, repo, path, ref)
    except Exception as e:
        logger.error("Error retrieving content for %s: %s", path, e)
        return None


async def _build_record(host, owner: str, repo: str, file, head_ref: str) -> ChangeRecord:
    content = None
    # A removed file has nothing at the head ref.
    if file.status != "removed":
        content = await _fetch_content(host, owner, repo, file.filename, head_ref)
    return ChangeRecord(
        filename=file.filename,
        status=file.status,
        patch=file.patch or "",
        additions=file.additions or 0,
        deletions=file.deletions or 0,
        content=content,
    )


async def _collect_records(host, owner: str, repo: str, pull_number: int, head_ref: str) -> list[ChangeRecord]:
    files = await asyncio.to_thread(host.list_files, owner, repo, pull_number)
    # gather() preserves argument order, so records line up with the host's file list.
    return list(await asyncio.gather(*(_build_record(host, owner, repo, f, head_ref) for f in files)))


async def collect(
    host, owner: str, repo: str, pull_number: int, head_ref: str
) -> tuple[list[ChangeRecord], list[str]]:
    """Return the PR's change records and commit messages.

    File listing and commit listing failures propagate; only per-file
    content retrieval is best-effort.
    """
    records, commit_messages = await asyncio.gather(
        _collect_records(host, owner, repo, pull_number, head_ref),
        asyncio.to_thread(host.list_commit_messages, owner, repo, pull_number),
    )
    fetched = sum(1 for r in records if r.content is not None)
    logger.info(
        "Collected %d file(s) (%d with content) and %d commit(s) for %s/%s#%d",
        len(records),
        fetched,
        len(commit_messages),
        owner,
        repo,
        pull_number,
    )
    return records, commit_messages
