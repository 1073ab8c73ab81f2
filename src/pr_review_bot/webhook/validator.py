"""
Webhook Payload Validator

Parses and sanity-checks inbound GitHub pull_request webhook bodies
and decides whether the event should be reviewed.
"""

import json
import logging
from dataclasses import dataclass
from typing import Optional, Union

from pydantic import ValidationError

from ..errors import MalformedPayload
from ..models.webhook import PullRequestAction, WebhookEvent, WebhookPayload


logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('action', 'pull_request', 'repository')


@dataclass(frozen=True)
class ValidationResult:
    """Validated event, or a marker that the action is out of scope."""
    event: Optional[WebhookEvent] = None
    action: Optional[str] = None

    @property
    def ignored(self) -> bool:
        return self.event is None


class PayloadValidator:
    """
    Validator for pull_request webhook payloads.

    Required shape:
        {action, pull_request: {number, head: {sha}}, repository: {name, owner: {login}}}

    Only opened, synchronize and edited actions are reviewed.
    """

    def validate(self, body: Union[str, bytes, None]) -> ValidationResult:
        """
        Validate a raw request body.

        Args:
            body: Raw webhook request body

        Returns:
            ValidationResult with the parsed event, or an ignored marker

        Raises:
            MalformedPayload: If the body is empty, not JSON, or has the wrong shape
        """
        data = self._parse_body(body)

        missing = [name for name in REQUIRED_FIELDS if data.get(name) is None]
        if missing:
            raise MalformedPayload(f"Missing required fields: {', '.join(missing)}")

        action = data['action']
        if not isinstance(action, str):
            raise MalformedPayload("Malformed payload: action: must be a string")
        for name in ('pull_request', 'repository'):
            if not isinstance(data[name], dict):
                raise MalformedPayload(f"Malformed payload: {name}: must be an object")

        if not PullRequestAction.classify(action).is_reviewable:
            logger.info(f"Ignoring pull_request action: {action!r}")
            return ValidationResult(action=action)

        try:
            payload = WebhookPayload.model_validate(data)
        except ValidationError as e:
            raise MalformedPayload(f"Malformed payload: {self._describe(e)}") from e

        event = payload.to_event()
        logger.info(f"Validated {event.action.value} event for {event.repository}#{event.pr_number}")
        return ValidationResult(event=event, action=event.action.value)

    def _parse_body(self, body: Union[str, bytes, None]) -> dict:
        """Decode and parse the body into a JSON object."""
        if isinstance(body, bytes):
            try:
                body = body.decode('utf-8')
            except UnicodeDecodeError as e:
                raise MalformedPayload("Request body is not valid JSON.") from e

        if body is None or not body.strip():
            raise MalformedPayload("Request body is empty.")

        try:
            data = json.loads(body)
        except ValueError as e:
            raise MalformedPayload("Request body is not valid JSON.") from e

        if not isinstance(data, dict):
            raise MalformedPayload("Request body is not valid JSON.")

        return data

    def _describe(self, error: ValidationError) -> str:
        """Summarize pydantic errors as 'field.path: message' pairs."""
        parts = []
        for item in error.errors():
            location = '.'.join(str(part) for part in item['loc'])
            parts.append(f"{location}: {item['msg']}")
        return '; '.join(parts)
