"""
GitHub Service
==============
Source-control collaborator: the only module that talks to the GitHub REST API.

Operations:
    - fetch_file_content  → (decoded text, blob sha)
    - update_file         → write new content given the previous sha
    - fetch_commit_files  → per-file unified-diff patches of a commit
    - fetch_repo_branches / fetch_user_repos

Error Mapping:
    - HTTP 404            → NotFoundError
    - other HTTP / network failures → UpstreamError
Callers decide whether an error aborts the request or is recorded per file.
"""
import base64
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from app.core.config import GITHUB_API_BASE
from app.core.errors import NotFoundError, UpstreamError
from app.models.analysis import CommitFile

logger = logging.getLogger(__name__)


class GitHubService:
    """
    Thin async wrapper over the GitHub REST API for one access token.

    Usage:
        async with GitHubService(token) as github:
            content, sha = await github.fetch_file_content("o", "r", "src/a.ts", "main")
    """

    def __init__(
        self,
        access_token: str,
        base_url: str = GITHUB_API_BASE,
        http: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "Stress-Engine",
        }
        self._http = http

    async def __aenter__(self) -> "GitHubService":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get_http(self) -> httpx.AsyncClient:
        """Lazy-initialise the HTTP client."""
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(headers=self.headers, timeout=20.0)
        return self._http

    async def close(self) -> None:
        if self._http and not self._http.is_closed:
            await self._http.aclose()
            self._http = None

    async def _request(self, method: str, path: str, what: str, **kwargs) -> Any:
        http = await self._get_http()
        url = f"{self.base_url}{path}"
        try:
            resp = await http.request(method, url, headers=self.headers, **kwargs)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 404:
                raise NotFoundError(f"{what} not found") from e
            logger.warning("GitHub %s %s failed: HTTP %d", method, path, status)
            raise UpstreamError(f"GitHub request for {what.lower()} failed: HTTP {status}") from e
        except httpx.HTTPError as e:
            logger.warning("GitHub %s %s failed: %s", method, path, e)
            raise UpstreamError(f"GitHub request for {what.lower()} failed: {e}") from e

    # -------------------------------------------------------------------
    # Files
    # -------------------------------------------------------------------
    async def fetch_file_content(
        self, owner: str, repo: str, path: str, ref: str
    ) -> Tuple[str, str]:
        """
        Fetch and decode a file at a branch / ref.

        Returns
        -------
        tuple[str, str]
            (utf-8 decoded content, blob sha)
        """
        data = await self._request(
            "GET", f"/repos/{owner}/{repo}/contents/{path}", "File",
            params={"ref": ref},
        )
        if not isinstance(data, dict) or "content" not in data:
            raise UpstreamError(f"{path} is not a regular file")
        content = base64.b64decode(data["content"]).decode("utf-8")
        return content, data.get("sha", "")

    async def update_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        sha: str,
        branch: str,
    ) -> Dict[str, Any]:
        """Commit new content for an existing file."""
        body = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "sha": sha,
            "branch": branch,
        }
        logger.info("Writing %s to %s/%s@%s", path, owner, repo, branch)
        return await self._request(
            "PUT", f"/repos/{owner}/{repo}/contents/{path}", "File", json=body,
        )

    # -------------------------------------------------------------------
    # Commits / branches / repos
    # -------------------------------------------------------------------
    async def fetch_commit_files(self, owner: str, repo: str, sha: str) -> List[CommitFile]:
        """Resolve a commit into its per-file patches."""
        data = await self._request("GET", f"/repos/{owner}/{repo}/commits/{sha}", "Commit")
        return [
            CommitFile(filename=f.get("filename", ""), patch=f.get("patch"))
            for f in data.get("files", [])
        ]

    async def fetch_repo_branches(self, owner: str, repo: str) -> List[Dict[str, Any]]:
        return await self._request(
            "GET", f"/repos/{owner}/{repo}/branches", "Branches",
            params={"per_page": 100},
        )

    async def fetch_user_repos(self) -> List[Dict[str, Any]]:
        return await self._request(
            "GET", "/user/repos", "Repositories",
            params={"sort": "updated", "per_page": 100},
        )
