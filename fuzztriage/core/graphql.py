"""HTTP client for the GitHub GraphQL API."""

from __future__ import annotations

import logging
from typing import Any, Protocol, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

USER_AGENT = "fuzztriage"

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class GraphQLRequest(Protocol):
    def to_body(self) -> dict[str, Any]: ...


def _error_message(payload: Any) -> str | None:
    """Pull a human-readable reason out of an error reply body."""
    if not isinstance(payload, dict):
        return None
    message = payload.get("message")
    if isinstance(message, str) and message:
        return message
    errors = payload.get("errors")
    if isinstance(errors, list):
        messages = [e["message"] for e in errors if isinstance(e, dict) and e.get("message")]
        if messages:
            return "; ".join(messages)
    return None


class GraphQLClientError(RuntimeError):
    """Raised when a GraphQL call fails below the GraphQL layer.

    ``payload`` holds the decoded reply body when there was one.
    """

    def __init__(self, message: str, status_code: int | None = None, payload: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class GraphQLClient:
    """Bearer-authenticated GraphQL client.

    GraphQL-level ``errors`` in a 2xx reply are part of a valid reply and are
    returned on the response model.  Non-2xx replies, transport failures,
    undecodable bodies and schema mismatches raise ``GraphQLClientError``.
    Nothing is retried.
    """

    def __init__(
        self,
        endpoint: str,
        token: str,
        *,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.endpoint = endpoint
        self._client = httpx.Client(
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {token}",
                "User-Agent": USER_AGENT,
                # opt in to the next global node id format
                "X-Github-Next-Global-ID": "1",
            },
        )

    def __enter__(self) -> GraphQLClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def post(self, body: dict[str, Any]) -> tuple[int, Any]:
        """POST a raw body; return the status code and decoded JSON (possibly ``None``)."""
        try:
            response = self._client.post(self.endpoint, json=body)
        except httpx.HTTPError as e:
            raise GraphQLClientError(f"request to {self.endpoint} failed: {e}") from e

        if not response.content.strip():
            return response.status_code, None
        try:
            return response.status_code, response.json()
        except ValueError as e:
            raise GraphQLClientError(
                f"non-JSON response from {self.endpoint} (HTTP {response.status_code})",
                status_code=response.status_code,
            ) from e

    def execute_raw(
        self, request: GraphQLRequest, response_type: type[ResponseT]
    ) -> tuple[ResponseT | None, Any]:
        """Send *request*; return the validated reply and the decoded payload.

        The validated reply is ``None`` when the server sent no payload.
        """
        status_code, payload = self.post(request.to_body())
        logger.debug("graphql HTTP %d: %s", status_code, payload)
        if not 200 <= status_code < 300:
            reason = _error_message(payload) or "no error message"
            raise GraphQLClientError(
                f"HTTP {status_code} from {self.endpoint}: {reason}",
                status_code=status_code,
                payload=payload,
            )
        if payload is None:
            return None, None
        if not isinstance(payload, dict):
            raise GraphQLClientError(
                f"unexpected GraphQL payload type {type(payload).__name__}",
                status_code=status_code,
                payload=payload,
            )
        try:
            return response_type.model_validate(payload), payload
        except ValidationError as e:
            raise GraphQLClientError(
                f"malformed {response_type.__name__} (HTTP {status_code}): {e}",
                status_code=status_code,
                payload=payload,
            ) from e

    def execute(self, request: GraphQLRequest, response_type: type[ResponseT]) -> ResponseT | None:
        """Send *request* and validate the reply as *response_type*.

        Returns ``None`` when the server replied with no payload.
        """
        response, _ = self.execute_raw(request, response_type)
        return response
