"""Client for the interference analysis backend.

One GET per pull request, no retry and no backoff: a missing or unusable
payload is reported as AnalysisNotFound and the caller decides what to do.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from interlens_core.errors import AnalysisNotFound, TypeTagError
from interlens_core.models import AnalysisOutput

# httpx logs every request at INFO, which clutters CLI output
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

__all__ = ["AnalysisService", "load"]

DEFAULT_TIMEOUT = 10.0


class AnalysisService:
    """Fetches finished analyses from ``{base_url}/analysis``."""

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=httpx.Timeout(self.timeout))

    async def get_analysis_output(self, owner: str, repo: str, pull_number: int) -> AnalysisOutput:
        """Fetch and build the AnalysisOutput for one pull request.

        Raises:
            AnalysisNotFound: non-2xx status, transport failure, an empty or
                non-object JSON body, or a payload whose fields have the wrong shape.
            TypeTagError: the payload carries an unknown taxonomy value.
        """
        params = {"owner": owner, "repo": repo, "pull_number": pull_number}
        try:
            async with self._client() as client:
                response = await client.get("/analysis", params=params)
        except httpx.HTTPError as e:
            raise AnalysisNotFound(owner, repo, pull_number, f"request failed: {e}") from e

        if not response.is_success:
            raise AnalysisNotFound(owner, repo, pull_number, f"HTTP {response.status_code}")

        payload = self._decode(response)
        if not payload:
            raise AnalysisNotFound(owner, repo, pull_number, "empty payload")

        try:
            analysis = AnalysisOutput.from_dict(payload)
        except TypeTagError:
            raise
        except (TypeError, ValueError, AttributeError) as e:
            raise AnalysisNotFound(owner, repo, pull_number, f"malformed payload: {e}") from e

        logger.debug(
            "Loaded analysis %s for %s/%s#%d (%d dependencies)",
            analysis.uuid,
            owner,
            repo,
            pull_number,
            len(analysis.events),
        )
        return analysis

    @staticmethod
    def _decode(response: httpx.Response) -> dict[str, Any] | None:
        if not response.content:
            return None
        try:
            data = response.json()
        except ValueError:
            return None
        return data if isinstance(data, dict) else None


async def load(
    owner: str,
    repository: str,
    pull_number: int,
    analysis_api: str,
    timeout: float = DEFAULT_TIMEOUT,
) -> AnalysisOutput:
    return await AnalysisService(analysis_api, timeout=timeout).get_analysis_output(owner, repository, pull_number)
