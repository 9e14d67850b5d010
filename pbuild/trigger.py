"""Build service client."""

from __future__ import annotations

import json
import logging

import httpx

from .errors import RemoteTriggerFailure
from .models import BuildConfig, BuildRequest, BuildResult

logger = logging.getLogger(__name__)


def personal_build_message(user_name: str) -> str:
    return f"Personal build by {user_name or 'unknown user'}"


def _parse_number(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isascii() and value.isdecimal():
        try:
            return int(value)
        except ValueError:
            return None
    return None


def parse_build_response(body: str) -> BuildResult:
    """Classify a response body.

    The service does not signal errors reliably through status codes, so only
    the body is inspected: a JSON object carrying a numeric ``number`` and no
    ``error``/``errors`` key is a success, anything else is a failure.
    """
    try:
        data = json.loads(body)
    except ValueError:
        # JSONDecodeError, or an integer too long to convert
        return BuildResult(error=body)
    if not isinstance(data, dict) or "error" in data or "errors" in data:
        return BuildResult(error=body)
    number = _parse_number(data.get("number"))
    if number is None:
        return BuildResult(error=body)
    return BuildResult(number=number)


class BuildTrigger:
    def __init__(self, config: BuildConfig, client: httpx.Client | None = None) -> None:
        self.config = config
        self.client = client

    def submit(self, request: BuildRequest) -> BuildResult:
        url = self.config.builds_endpoint
        logger.debug("POST %s branch=%s commit=%s", url, request.branch, request.commit)
        try:
            if self.client is not None:
                response = self.client.post(url, data=request.to_form(self.config.api_key))
            else:
                with httpx.Client() as client:
                    response = client.post(url, data=request.to_form(self.config.api_key))
        except httpx.HTTPError as exc:
            raise RemoteTriggerFailure(f"Couldn't reach {url}: {exc}") from exc
        logger.debug("response status %s", response.status_code)
        return parse_build_response(response.text)
