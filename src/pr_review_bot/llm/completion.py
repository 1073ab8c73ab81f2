"""
Completion Client

Sends review prompts to a chat-completion endpoint and extracts
the reviewer feedback from the response.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from ..config import CompletionConfig
from ..errors import UpstreamFailed
from ..models.review import NO_FEEDBACK_FALLBACK
from .prompts import SYSTEM_PROMPT


logger = logging.getLogger(__name__)


class CompletionClient:
    """
    Client for an OpenAI-compatible chat completion endpoint.

    One request per review; non-success responses are fatal and
    are never retried.
    """

    def __init__(self, config: Optional[CompletionConfig] = None, session: Optional[requests.Session] = None):
        """
        Initialize completion client.

        Args:
            config: Completion endpoint settings
            session: Optional requests session to reuse
        """
        self.config = config or CompletionConfig()
        self.session = session or requests.Session()

    @property
    def model_name(self) -> str:
        return self.config.model or "default"

    def _auth_headers(self) -> Dict[str, str]:
        if self.config.auth_scheme == "api-key":
            return {'api-key': self.config.api_key}
        return {'Authorization': f'Bearer {self.config.api_key}'}

    def build_payload(self, prompt: str) -> Dict[str, Any]:
        """Build the request body for a prompt."""
        messages: List[Dict[str, str]] = [
            {'role': 'system', 'content': SYSTEM_PROMPT},
            {'role': 'user', 'content': prompt},
        ]
        payload: Dict[str, Any] = {
            'messages': messages,
            'max_tokens': self.config.max_tokens,
        }
        if self.config.model:
            payload['model'] = self.config.model
        return payload

    def review(self, prompt: str) -> str:
        """
        Request a review for a prompt.

        Args:
            prompt: Composed review prompt

        Returns:
            Feedback text, never empty

        Raises:
            UpstreamFailed: On transport errors or non-success responses
        """
        logger.info(f"Requesting review completion (max_tokens={self.config.max_tokens})")

        try:
            response = self.session.post(
                self.config.endpoint,
                json=self.build_payload(prompt),
                headers=self._auth_headers(),
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as e:
            logger.error(f"Completion request failed: {e}")
            raise UpstreamFailed(f"Completion request failed: {e}") from e

        if not response.ok:
            logger.error(f"Completion endpoint returned {response.status_code}")
            raise UpstreamFailed(
                f"Completion API error: {response.status_code} - {response.text}",
                status_code=response.status_code,
                response_body=response.text,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamFailed(
                f"Completion API returned invalid JSON: {e}",
                status_code=response.status_code,
                response_body=response.text,
            ) from e

        return self.extract_feedback(data)

    @staticmethod
    def extract_feedback(data: Any) -> str:
        """Extract the first choice's message text, falling back when empty."""
        try:
            content = data['choices'][0]['message']['content']
        except (KeyError, IndexError, TypeError):
            content = None

        if not isinstance(content, str) or not content.strip():
            logger.warning("Completion returned no feedback text")
            return NO_FEEDBACK_FALLBACK

        return content
