"""
PR Review Bot API

Main interface that orchestrates one review pass, from the inbound
webhook body to the comment posted on the pull request.
"""

import logging
from datetime import datetime
from typing import Dict, Optional, Union

from .config import AppConfig
from .errors import MalformedPayload, UpstreamFailed
from .formatting.comment import CommentPublisher
from .github.client import GitHubClient
from .github.fetcher import RepositoryContentFetcher
from .llm.completion import CompletionClient
from .llm.prompts import ReviewPromptComposer
from .models.review import FetchedChanges, Outcome, PipelineState, ReviewResult
from .models.webhook import WebhookEvent
from .webhook.validator import PayloadValidator


logger = logging.getLogger(__name__)


TRANSITIONS = {
    PipelineState.START: {PipelineState.VALIDATED, PipelineState.REJECTED},
    PipelineState.VALIDATED: {PipelineState.FETCHED},
    PipelineState.FETCHED: {PipelineState.COMPOSED, PipelineState.DONE},
    PipelineState.COMPOSED: {PipelineState.REVIEWED},
    PipelineState.REVIEWED: {PipelineState.PUBLISHED},
    PipelineState.PUBLISHED: {PipelineState.DONE},
}

RESPONSE_MESSAGES = {
    Outcome.IGNORED: "Ignored event",
    Outcome.NO_CHANGES: "No changes to review",
    Outcome.REVIEWED: "Reviewed",
}


class InvalidTransition(RuntimeError):
    """Raised when the pipeline attempts an undefined state change."""


def advance(current: PipelineState, target: PipelineState) -> PipelineState:
    """Move the pipeline to the next state. FAILED is reachable from any state."""
    if target is PipelineState.FAILED or target in TRANSITIONS.get(current, set()):
        logger.debug(f"Pipeline state: {current.value} -> {target.value}")
        return target
    raise InvalidTransition(f"Cannot move from {current.value} to {target.value}")


class PRReviewAPI:
    """
    Main PR Review Bot interface.

    Orchestrates a single review pass:
    1. Validate the webhook payload
    2. Fetch changed files, diffs and full contents
    3. Compose the review prompt
    4. Request feedback from the completion endpoint
    5. Post the feedback as a pull request comment
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        validator: Optional[PayloadValidator] = None,
        fetcher: Optional[RepositoryContentFetcher] = None,
        composer: Optional[ReviewPromptComposer] = None,
        completion_client: Optional[CompletionClient] = None,
        publisher: Optional[CommentPublisher] = None,
    ):
        """
        Initialize PR Review Bot API.

        Args:
            config: Application configuration
            validator: Payload validator override
            fetcher: Content fetcher override
            composer: Prompt composer override
            completion_client: Completion client override
            publisher: Comment publisher override
        """
        self.config = config or AppConfig()

        logger.info("Initializing PR Review Bot components...")

        github_client = None
        if fetcher is None or publisher is None:
            github_client = GitHubClient(self.config.github)

        self.validator = validator or PayloadValidator()
        self.fetcher = fetcher or RepositoryContentFetcher(
            github_client,
            max_workers=self.config.review.content_fetch_workers
        )
        self.composer = composer or ReviewPromptComposer(
            instructions=self.config.review.instructions
        )
        self.completion_client = completion_client or CompletionClient(self.config.completion)
        self.publisher = publisher or CommentPublisher(
            github_client,
            banner=self.config.review.comment_banner
        )

    def handle_event(self, body: Union[str, bytes, None]) -> ReviewResult:
        """
        Process one webhook delivery.

        Args:
            body: Raw webhook request body

        Returns:
            ReviewResult carrying the outcome and response message
        """
        start_time = datetime.now()
        state = PipelineState.START
        event: Optional[WebhookEvent] = None

        def finish(outcome: Outcome, final_state: PipelineState, message: str, **extra) -> ReviewResult:
            return ReviewResult(
                outcome=outcome,
                message=message,
                state=final_state,
                event=event,
                processing_time=(datetime.now() - start_time).total_seconds(),
                **extra
            )

        try:
            logger.info("Step 1: Validating webhook payload")
            try:
                validation = self.validator.validate(body)
            except MalformedPayload as e:
                logger.warning(f"Rejected webhook payload: {e}")
                state = advance(state, PipelineState.REJECTED)
                return finish(Outcome.VALIDATION_FAILED, state, str(e))

            if validation.ignored:
                state = advance(state, PipelineState.REJECTED)
                return finish(Outcome.IGNORED, state, RESPONSE_MESSAGES[Outcome.IGNORED])

            event = validation.event
            state = advance(state, PipelineState.VALIDATED)
            logger.info(f"Processing PR #{event.pr_number} in {event.repository}")

            logger.info("Step 2: Fetching code diff and full file contents")
            changes = self._fetch(event)
            state = advance(state, PipelineState.FETCHED)

            if changes.is_empty:
                logger.info(f"No reviewable changes in {event.repository}#{event.pr_number}")
                state = advance(state, PipelineState.DONE)
                return finish(
                    Outcome.NO_CHANGES, state, RESPONSE_MESSAGES[Outcome.NO_CHANGES],
                    files_reviewed=len(changes.files)
                )

            prompt = self._compose(changes)
            state = advance(state, PipelineState.COMPOSED)

            logger.info("Step 3: Analyzing code with the completion endpoint")
            feedback = self._review(prompt)
            state = advance(state, PipelineState.REVIEWED)

            logger.info("Step 4: Posting feedback to GitHub")
            comment_url = self._publish(event, feedback)
            state = advance(state, PipelineState.PUBLISHED)

            state = advance(state, PipelineState.DONE)
            result = finish(
                Outcome.REVIEWED, state, RESPONSE_MESSAGES[Outcome.REVIEWED],
                files_reviewed=len(changes.files),
                comment_url=comment_url or None,
                metadata=self._create_metadata(changes, prompt)
            )
            logger.info(f"Review completed for {event.repository}#{event.pr_number} ({result.processing_time:.2f}s)")
            return result

        except UpstreamFailed as e:
            logger.error(f"Upstream call failed in state {state.value}: {e}")
            failed_in = state
            state = advance(state, PipelineState.FAILED)
            return finish(
                Outcome.UPSTREAM_FAILED, state, f"Internal server error: {e}",
                metadata={'failed_in': failed_in.value, 'upstream_status': e.status_code}
            )

        except Exception as e:
            logger.exception("Unhandled exception while processing webhook")
            failed_in = state
            state = PipelineState.FAILED
            return finish(
                Outcome.FAILED, state, f"Internal server error: {e}",
                metadata={'failed_in': failed_in.value}
            )

    def _fetch(self, event: WebhookEvent) -> FetchedChanges:
        """VALIDATED -> FETCHED"""
        return self.fetcher.fetch(
            event.repository_owner,
            event.repository_name,
            event.pr_number,
            event.head_sha
        )

    def _compose(self, changes: FetchedChanges) -> str:
        """FETCHED -> COMPOSED"""
        return self.composer.compose(changes.diff_text, changes.full_files_text)

    def _review(self, prompt: str) -> str:
        """COMPOSED -> REVIEWED"""
        return self.completion_client.review(prompt)

    def _publish(self, event: WebhookEvent, feedback: str) -> str:
        """REVIEWED -> PUBLISHED"""
        return self.publisher.publish(
            event.repository_owner,
            event.repository_name,
            event.pr_number,
            feedback
        )

    def _create_metadata(self, changes: FetchedChanges, prompt: str) -> Dict:
        """Create metadata for the review result."""
        return {
            'files_changed': len(changes.files),
            'files_with_patch': sum(1 for f in changes.files if f.patch is not None),
            'files_with_content': sum(1 for f in changes.files if f.full_content),
            'prompt_chars': len(prompt),
            'max_tokens': self.config.completion.max_tokens,
        }

    def get_system_health(self) -> Dict:
        """Get configuration health status; no outbound calls are made."""
        missing = []
        if not self.config.github.token:
            missing.append('github.token')
        if not self.config.completion.endpoint:
            missing.append('completion.endpoint')
        if not self.config.completion.api_key:
            missing.append('completion.api_key')

        return {
            'status': 'degraded' if missing else 'healthy',
            'missing_settings': missing,
            'timestamp': datetime.now().isoformat()
        }
