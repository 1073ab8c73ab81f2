"""
Unit tests for the review orchestrator and its state machine.
"""

import json
from unittest.mock import Mock

import pytest

from pr_review_bot.api import InvalidTransition, PRReviewAPI, advance
from pr_review_bot.errors import UpstreamFailed
from pr_review_bot.formatting.comment import CommentPublisher
from pr_review_bot.github.fetcher import RepositoryContentFetcher
from pr_review_bot.llm.completion import CompletionClient
from pr_review_bot.llm.prompts import ReviewPromptComposer
from pr_review_bot.models.review import ChangedFile, FetchedChanges, Outcome, PipelineState


BODY = json.dumps({
    "action": "synchronize",
    "pull_request": {"number": 7, "head": {"sha": "def"}},
    "repository": {"name": "repo", "owner": {"login": "owner"}},
})


class TestStateMachine:
    """Test pipeline state transitions."""

    @pytest.mark.parametrize("current,target", [
        (PipelineState.START, PipelineState.VALIDATED),
        (PipelineState.START, PipelineState.REJECTED),
        (PipelineState.VALIDATED, PipelineState.FETCHED),
        (PipelineState.FETCHED, PipelineState.COMPOSED),
        (PipelineState.FETCHED, PipelineState.DONE),
        (PipelineState.COMPOSED, PipelineState.REVIEWED),
        (PipelineState.REVIEWED, PipelineState.PUBLISHED),
        (PipelineState.PUBLISHED, PipelineState.DONE),
        (PipelineState.COMPOSED, PipelineState.FAILED),
    ])
    def test_allowed_transitions(self, current, target):
        assert advance(current, target) is target

    @pytest.mark.parametrize("current,target", [
        (PipelineState.START, PipelineState.FETCHED),
        (PipelineState.VALIDATED, PipelineState.COMPOSED),
        (PipelineState.REVIEWED, PipelineState.DONE),
        (PipelineState.DONE, PipelineState.START),
        (PipelineState.REJECTED, PipelineState.VALIDATED),
    ])
    def test_rejected_transitions(self, current, target):
        with pytest.raises(InvalidTransition):
            advance(current, target)


class TestPRReviewAPI:
    """Test PRReviewAPI with stubbed collaborators."""

    def setup_method(self):
        self.fetcher = Mock(spec=RepositoryContentFetcher)
        self.fetcher.fetch.return_value = FetchedChanges(files=(
            ChangedFile("a.py", "+x=1", "x=1"),
        ))
        self.completion_client = Mock(spec=CompletionClient)
        self.completion_client.review.return_value = "Looks fine."
        self.publisher = Mock(spec=CommentPublisher)
        self.publisher.publish.return_value = "https://github.com/owner/repo/pull/7#issuecomment-9"

        self.api = PRReviewAPI(
            fetcher=self.fetcher,
            composer=ReviewPromptComposer(),
            completion_client=self.completion_client,
            publisher=self.publisher,
        )

    def test_full_pass(self):
        result = self.api.handle_event(BODY)

        assert result.outcome is Outcome.REVIEWED
        assert result.state is PipelineState.DONE
        assert result.event.repository == "owner/repo"
        self.fetcher.fetch.assert_called_once_with("owner", "repo", 7, "def")
        prompt = self.completion_client.review.call_args[0][0]
        assert "File: a.py\n+x=1\n\n" in prompt
        self.publisher.publish.assert_called_once_with("owner", "repo", 7, "Looks fine.")
        assert result.metadata["files_with_patch"] == 1
        assert result.metadata["files_with_content"] == 1
        assert result.processing_time >= 0

    def test_no_changes_short_circuit(self):
        self.fetcher.fetch.return_value = FetchedChanges(files=(ChangedFile("logo.png"),))

        result = self.api.handle_event(BODY)

        assert result.outcome is Outcome.NO_CHANGES
        assert result.state is PipelineState.DONE
        self.completion_client.review.assert_not_called()
        self.publisher.publish.assert_not_called()

    def test_completion_failure_skips_publish(self):
        self.completion_client.review.side_effect = UpstreamFailed("Completion API error: 500 - oops", status_code=500)

        result = self.api.handle_event(BODY)

        assert result.outcome is Outcome.UPSTREAM_FAILED
        assert result.state is PipelineState.FAILED
        assert result.message == "Internal server error: Completion API error: 500 - oops"
        assert result.metadata["upstream_status"] == 500
        self.publisher.publish.assert_not_called()

    def test_publish_failure(self):
        self.publisher.publish.side_effect = UpstreamFailed("GitHub API error: 404 - Not Found", status_code=404)

        result = self.api.handle_event(BODY)

        assert result.outcome is Outcome.UPSTREAM_FAILED
        assert self.publisher.publish.call_count == 1

    def test_validation_failure_reaches_no_collaborator(self):
        result = self.api.handle_event("{}")

        assert result.outcome is Outcome.VALIDATION_FAILED
        assert result.event is None
        self.fetcher.fetch.assert_not_called()

    def test_health(self):
        health = self.api.get_system_health()

        assert health['status'] == 'degraded'
        assert set(health['missing_settings']) == {'github.token', 'completion.endpoint', 'completion.api_key'}


class TestCommentPublisher:
    """Test comment body formatting and posting."""

    def test_banner(self):
        client = Mock()
        client.create_issue_comment.return_value = {"html_url": "https://x"}
        publisher = CommentPublisher(client, banner="### Review")

        url = publisher.publish("o", "r", 1, "Rename x.")

        client.create_issue_comment.assert_called_once_with("o", "r", 1, "### Review\n\nRename x.")
        assert url == "https://x"

    def test_no_banner(self):
        publisher = CommentPublisher(Mock(), banner="")

        assert publisher.format_body("Rename x.") == "Rename x."

    @pytest.mark.parametrize("feedback", ["", "  ", None])
    def test_empty_feedback_uses_fallback(self, feedback):
        publisher = CommentPublisher(Mock(), banner=None)

        assert publisher.format_body(feedback) == "No feedback generated."

    def test_failure_propagates(self):
        client = Mock()
        client.create_issue_comment.side_effect = UpstreamFailed("GitHub API error: 403 - Forbidden", status_code=403)

        with pytest.raises(UpstreamFailed):
            CommentPublisher(client).publish("o", "r", 1, "text")
