"""GitHub token resolution.

Tried in order, first hit wins:
  1. GITHUB_TOKEN environment variable
  2. `gh auth token` from an authenticated GitHub CLI session

Public repositories work without a token at a lower rate limit, so a
missing token is not an error here.
"""

from __future__ import annotations

import logging
import os
import subprocess

logger = logging.getLogger(__name__)


def resolve_github_token() -> str | None:
    """Return a GitHub token from GITHUB_TOKEN or the gh CLI, or None if neither has one."""
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        return token

    try:
        result = subprocess.run(["gh", "auth", "token"], capture_output=True, text=True, timeout=5)
    except (FileNotFoundError, subprocess.TimeoutExpired):
        logger.debug("gh CLI unavailable; continuing without a GitHub token.")
        return None

    gh_token = result.stdout.strip() if result.returncode == 0 else ""
    if gh_token:
        logger.debug("Using GitHub token from the gh CLI session.")
        return gh_token
    return None
