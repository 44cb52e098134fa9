from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional, Sequence, Tuple

import httpx  # type: ignore[import]

from pash.config import Settings
from pash.errors import MalformedResponseError, UpstreamError
from pash.models import ReviewRequest, ReviewResponse, ReviewResult

logger = logging.getLogger(__name__)

ExtractionStrategy = Callable[[Any], Optional[str]]

_NOT_JSON = object()


def _dig(payload: Any, *path: str | int) -> Any:
    current = payload
    for key in path:
        if isinstance(key, int):
            if not isinstance(current, list) or len(current) <= key:
                return None
        elif not isinstance(current, dict):
            return None
        try:
            current = current[key]
        except KeyError:
            return None
    return current


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


def choices_message_content(payload: Any) -> Optional[str]:
    """OpenAI-style ``choices[0].message.content``."""
    return _text(_dig(payload, "choices", 0, "message", "content"))


def top_level_content(payload: Any) -> Optional[str]:
    return _text(_dig(payload, "content"))


def message_content(payload: Any) -> Optional[str]:
    return _text(_dig(payload, "message", "content"))


EXTRACTION_STRATEGIES: Tuple[ExtractionStrategy, ...] = (
    choices_message_content,
    top_level_content,
    message_content,
)


def count_line_changes(diff: str) -> Tuple[int, int]:
    """
    Count added and removed lines in a unified diff.

    Every line starting with ``+`` or ``-`` is counted, which includes the
    ``+++``/``---`` file header lines.
    """
    lines = diff.splitlines()
    added = sum(1 for line in lines if line.startswith("+"))
    removed = sum(1 for line in lines if line.startswith("-"))
    return added, removed


def _parse_json(body: str) -> Any:
    try:
        return json.loads(body)
    except ValueError:
        return _NOT_JSON


class ReviewClient:
    """Sends one chat-completion request to a LiteLLM-compatible endpoint."""

    def __init__(
        self,
        *,
        api_url: str,
        api_key: str,
        model: str,
        http_client: Optional[httpx.Client] = None,
        strategies: Sequence[ExtractionStrategy] = EXTRACTION_STRATEGIES,
    ) -> None:
        self._api_url = api_url
        self._api_key = api_key
        self._model = model
        self._http_client = http_client
        self._strategies = tuple(strategies)

    @classmethod
    def from_settings(cls, settings: Settings, *, http_client: Optional[httpx.Client] = None) -> "ReviewClient":
        credentials = settings.require_review_credentials()
        return cls(
            api_url=credentials.api_url,
            api_key=credentials.api_key,
            model=credentials.model,
            http_client=http_client,
        )

    @property
    def model(self) -> str:
        return self._model

    @property
    def endpoint(self) -> str:
        return f"{self._api_url.rstrip('/')}/chat/completions"

    def build_request(self, prompt: str) -> ReviewRequest:
        return ReviewRequest(model=self._model, prompt=prompt)

    def send(self, request: ReviewRequest) -> ReviewResponse:
        if self._http_client is not None:
            return self._post(self._http_client, request)
        # No deadline on the round trip; a slow model simply blocks.
        with httpx.Client(timeout=None) as client:
            return self._post(client, request)

    def _post(self, client: httpx.Client, request: ReviewRequest) -> ReviewResponse:
        logger.debug("POST %s (model=%s, prompt=%d chars)", self.endpoint, request.model, len(request.prompt))
        try:
            response = client.post(
                self.endpoint,
                json=request.payload(),
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                },
            )
        except httpx.RequestError as exc:
            raise UpstreamError(
                f"Failed to reach the LiteLLM API at {self.endpoint}: {exc}",
                status_code=0,
                body="",
            ) from exc

        return ReviewResponse(status_code=response.status_code, raw_body=response.text)

    def extract_reply(self, response: ReviewResponse) -> str:
        body = response.raw_body
        payload = _parse_json(body)

        if response.status_code != 200:
            if payload is not _NOT_JSON and _dig(payload, "choices", 0, "message", "content") is not None:
                logger.warning(
                    "API returned HTTP %s but response appears valid, proceeding...", response.status_code
                )
            else:
                raise UpstreamError(
                    f"LiteLLM API returned a non-200 status code: {response.status_code}. Response: {body}",
                    status_code=response.status_code,
                    body=body,
                )

        if payload is _NOT_JSON:
            if not body.strip():
                raise MalformedResponseError(body)
            logger.debug("Response is not JSON; using the raw body as the review text")
            return body

        error = payload.get("error") if isinstance(payload, dict) else None
        if error is not None and error is not False:
            message = error.get("message") if isinstance(error, dict) else error
            if message is None:
                message = json.dumps(error)
            raise UpstreamError(
                f"LiteLLM API returned an error: {message}",
                status_code=response.status_code,
                body=body,
            )

        for strategy in self._strategies:
            text = strategy(payload)
            if text is not None:
                return text

        raise MalformedResponseError(body)

    def review(self, prompt: str, diff: str) -> ReviewResult:
        response = self.send(self.build_request(prompt))
        ai_text = self.extract_reply(response)
        added, removed = count_line_changes(diff)
        return ReviewResult(added_lines=added, removed_lines=removed, ai_text=ai_text)
