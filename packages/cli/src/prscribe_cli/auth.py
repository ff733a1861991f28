"""GitHub token resolution with gh CLI fallback.

Resolution order (stops at first success):
  1. GITHUB_TOKEN environment variable (already read by load_config)
  2. `gh auth token` (GitHub CLI session, for local `prscribe review` runs)

The webhook server normally runs as a GitHub App and needs neither.
"""

from __future__ import annotations

import logging
import subprocess

logger = logging.getLogger(__name__)


def resolve_github_token(config: dict) -> str | None:
    """Return a GitHub token or None if no token source is available. Never raises."""
    if config.get("github_token"):
        return config["github_token"]

    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None

    if result.returncode == 0 and result.stdout.strip():
        logger.debug("Resolved GitHub token via gh CLI session.")
        return result.stdout.strip()
    return None
