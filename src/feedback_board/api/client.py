"""
Async HTTP client for the GitHub Issues API.

This module provides the client the record store uses to list, create, fetch
and update feedback issues, plus comment and reaction calls. Requests are
never retried here; retry policy belongs to the caller.
"""

from typing import Any, Dict, List, Optional, Sequence, Type

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from ..config import get_settings
from ..exceptions import CreateError, FetchError, InvalidRequest, TrackerError, UpdateError
from ..models.record import Comment, ReactionKind, Record

USER_AGENT = "feedback-board-client"


class CreateIssueRequest(BaseModel):
    """Request model for issue creation."""
    title: str
    body: str
    labels: List[str]


class UpdateIssueRequest(BaseModel):
    """Request model for issue body updates."""
    body: str


class TrackerClient:
    """
    HTTP client for the issue tracker.

    Wraps an ``httpx.AsyncClient`` configured with bearer-token auth and JSON
    headers, and maps non-2xx responses and transport faults onto the
    board's typed errors.
    """

    def __init__(
        self,
        owner: Optional[str] = None,
        repo: Optional[str] = None,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        page_size: Optional[int] = None,
        max_pages: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the tracker client.

        Args:
            owner: Repository owner
            repo: Repository name
            token: Bearer token; requests are unauthenticated when empty
            base_url: Base URL for the tracker API
            timeout: Request timeout in seconds
            page_size: Issues requested per page when listing
            max_pages: Maximum pages followed when listing
            transport: Optional httpx transport, used by tests
        """
        settings = get_settings()
        self.owner = (owner if owner is not None else settings.tracker_owner).strip()
        self.repo = (repo if repo is not None else settings.tracker_repo).strip()
        self.base_url = base_url or settings.tracker_api_base_url
        self.timeout = timeout or settings.tracker_timeout
        self.page_size = page_size or settings.tracker_page_size
        self.max_pages = max_pages or settings.tracker_max_pages
        token = token if token is not None else settings.tracker_token

        headers = {
            "Accept": "application/vnd.github+json",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=httpx.Timeout(self.timeout),
            transport=transport,
        )

        logger.info(f"Initialized TrackerClient for {self.owner}/{self.repo} at {self.base_url}")

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "TrackerClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _issues_path(self, number: Optional[int] = None, suffix: str = "") -> str:
        if not self.owner or not self.repo:
            raise InvalidRequest("Tracker repository is not configured")
        path = f"/repos/{self.owner}/{self.repo}/issues"
        if number is not None:
            if isinstance(number, bool) or not isinstance(number, int) or number <= 0:
                raise InvalidRequest(f"Invalid issue number: {number!r}")
            path += f"/{number}"
        return path + suffix

    async def _request(
        self,
        method: str,
        url: str,
        error_cls: Type[TrackerError],
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """
        Send a single request and check its status.

        Args:
            method: HTTP method (GET, POST, PATCH)
            url: Path relative to the base URL, or an absolute pagination URL
            error_cls: Error type raised on failure
            params: Query parameters
            json_data: JSON request body

        Returns:
            httpx.Response: Successful response

        Raises:
            TrackerError: ``error_cls`` on transport faults or non-2xx status
        """
        logger.debug(f"Making {method} request to {url}")
        try:
            response = await self.client.request(method, url, params=params, json=json_data)
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} failed: {e}")
            raise error_cls(f"Request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.error(f"{method} {url} returned HTTP {response.status_code}")
            raise error_cls(f"HTTP {response.status_code}: {response.text}", response.status_code)

        logger.debug(f"Request successful: {method} {url}")
        return response

    @staticmethod
    def _decode(response: httpx.Response, model: Type[BaseModel], error_cls: Type[TrackerError]) -> Any:
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise error_cls(f"Failed to parse response: {e}", response.status_code) from e

    async def list_issues(self, labels: Optional[Sequence[str]] = None) -> List[Record]:
        """
        List open issues, newest first.

        Follows ``Link: rel="next"`` pagination up to ``max_pages`` and skips
        pull requests, which the tracker reports through the same endpoint.

        Args:
            labels: Only return issues carrying all of these labels

        Returns:
            List[Record]: Open issues

        Raises:
            FetchError: If any page fails
        """
        params: Dict[str, Any] = {
            "state": "open",
            "sort": "created",
            "direction": "desc",
            "per_page": self.page_size,
        }
        if labels:
            params["labels"] = ",".join(labels)

        records: List[Record] = []
        url: Optional[str] = self._issues_path()
        pages = 0
        while url is not None and pages < self.max_pages:
            response = await self._request("GET", url, FetchError, params=params)
            pages += 1
            try:
                items = response.json()
                for item in items:
                    if "pull_request" in item:
                        continue
                    records.append(Record.model_validate(item))
            except (ValueError, TypeError, ValidationError) as e:
                raise FetchError(f"Failed to parse issues response: {e}", response.status_code) from e

            next_link = response.links.get("next")
            url = next_link.get("url") if next_link else None
            # The next link already carries the query string
            params = None

        logger.info(f"Fetched {len(records)} open issues over {pages} page(s)")
        return records

    async def create_issue(self, title: str, body: str, labels: Sequence[str]) -> Record:
        """
        Create an issue.

        Raises:
            CreateError: If the tracker rejects the issue
        """
        request_data = CreateIssueRequest(title=title, body=body, labels=list(labels))
        response = await self._request(
            "POST", self._issues_path(), CreateError, json_data=request_data.model_dump()
        )
        record = self._decode(response, Record, CreateError)
        logger.info(f"Created issue #{record.number}")
        return record

    async def get_issue(self, number: int) -> Record:
        """
        Fetch a single issue.

        Raises:
            FetchError: If the issue cannot be retrieved
        """
        response = await self._request("GET", self._issues_path(number), FetchError)
        return self._decode(response, Record, FetchError)

    async def update_issue_body(self, number: int, body: str) -> None:
        """
        Replace the body of an issue.

        Raises:
            UpdateError: If the update is rejected
        """
        request_data = UpdateIssueRequest(body=body)
        await self._request(
            "PATCH", self._issues_path(number), UpdateError, json_data=request_data.model_dump()
        )
        logger.info(f"Updated body of issue #{number}")

    async def list_comments(self, number: int) -> List[Comment]:
        """
        List the comments on an issue.

        Raises:
            FetchError: If the comments cannot be retrieved
        """
        response = await self._request("GET", self._issues_path(number, "/comments"), FetchError)
        try:
            return [Comment.model_validate(item) for item in response.json()]
        except (ValueError, TypeError, ValidationError) as e:
            raise FetchError(f"Failed to parse comments response: {e}", response.status_code) from e

    async def add_comment(self, number: int, body: str) -> Comment:
        """
        Add a comment to an issue.

        Raises:
            CreateError: If the comment is rejected
        """
        if not body or not body.strip():
            raise InvalidRequest("Comment body must not be empty")
        response = await self._request(
            "POST", self._issues_path(number, "/comments"), CreateError, json_data={"body": body}
        )
        return self._decode(response, Comment, CreateError)

    async def add_reaction(self, number: int, kind: ReactionKind = ReactionKind.PLUS_ONE) -> None:
        """
        Add a reaction to an issue.

        Raises:
            UpdateError: If the reaction is rejected
        """
        try:
            content = ReactionKind(kind).value
        except ValueError as e:
            raise InvalidRequest(f"Unsupported reaction: {kind!r}") from e
        await self._request(
            "POST", self._issues_path(number, "/reactions"), UpdateError, json_data={"content": content}
        )
        logger.info(f"Added {content} reaction to issue #{number}")
