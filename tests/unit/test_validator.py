"""
Unit tests for the webhook payload validator.
"""

import json

import pytest

from pr_review_bot.errors import MalformedPayload
from pr_review_bot.models.webhook import PullRequestAction
from pr_review_bot.webhook.validator import PayloadValidator


def make_payload(**overrides):
    payload = {
        "action": "opened",
        "pull_request": {"number": 42, "head": {"sha": "abc"}},
        "repository": {"name": "r", "owner": {"login": "o"}},
    }
    payload.update(overrides)
    return payload


class TestPayloadValidator:
    """Unit tests for PayloadValidator."""

    def setup_method(self):
        self.validator = PayloadValidator()

    def test_valid_payload(self):
        result = self.validator.validate(json.dumps(make_payload()))

        assert not result.ignored
        assert result.event.action is PullRequestAction.OPENED
        assert result.event.pr_number == 42
        assert result.event.repository_name == "r"
        assert result.event.repository_owner == "o"
        assert result.event.head_sha == "abc"

    def test_bytes_body(self):
        result = self.validator.validate(json.dumps(make_payload(action="synchronize")).encode("utf-8"))

        assert result.event.action is PullRequestAction.SYNCHRONIZE

    def test_extra_fields_ignored(self):
        payload = make_payload(sender={"login": "someone"})
        payload["pull_request"]["title"] = "Add feature"

        result = self.validator.validate(json.dumps(payload))

        assert result.event.pr_number == 42

    @pytest.mark.parametrize("body", [None, "", "   \n", b""])
    def test_empty_body(self, body):
        with pytest.raises(MalformedPayload, match="Request body is empty."):
            self.validator.validate(body)

    @pytest.mark.parametrize("body", ["not json", "{broken", "[1, 2]", "\"opened\"", b"\xff\xfe"])
    def test_invalid_json(self, body):
        with pytest.raises(MalformedPayload, match="not valid JSON"):
            self.validator.validate(body)

    @pytest.mark.parametrize("field", ["action", "pull_request", "repository"])
    def test_missing_top_level_field(self, field):
        payload = make_payload()
        del payload[field]

        with pytest.raises(MalformedPayload, match=field):
            self.validator.validate(json.dumps(payload))

    def test_missing_fields_rejected_even_for_other_actions(self):
        payload = make_payload(action="closed")
        del payload["repository"]

        with pytest.raises(MalformedPayload):
            self.validator.validate(json.dumps(payload))

    @pytest.mark.parametrize("action", ["closed", "reopened", "labeled", "review_requested"])
    def test_ignored_actions(self, action):
        result = self.validator.validate(json.dumps(make_payload(action=action)))

        assert result.ignored
        assert result.event is None
        assert result.action == action

    def test_ignored_action_skips_nested_checks(self):
        payload = make_payload(action="closed", pull_request={"number": "x"})

        assert self.validator.validate(json.dumps(payload)).ignored

    def test_non_string_action(self):
        with pytest.raises(MalformedPayload, match="action"):
            self.validator.validate(json.dumps(make_payload(action=1)))

    @pytest.mark.parametrize("pull_request", [
        {"head": {"sha": "abc"}},
        {"number": "42", "head": {"sha": "abc"}},
        {"number": True, "head": {"sha": "abc"}},
        {"number": 0, "head": {"sha": "abc"}},
        {"number": 42},
        {"number": 42, "head": {}},
        {"number": 42, "head": {"sha": ""}},
        {"number": 42, "head": {"sha": 123}},
    ])
    def test_malformed_pull_request(self, pull_request):
        with pytest.raises(MalformedPayload, match="pull_request"):
            self.validator.validate(json.dumps(make_payload(pull_request=pull_request)))

    @pytest.mark.parametrize("repository", [
        {"owner": {"login": "o"}},
        {"name": "", "owner": {"login": "o"}},
        {"name": "r"},
        {"name": "r", "owner": {}},
        {"name": "r", "owner": {"login": "   "}},
        {"name": "r", "owner": "o"},
    ])
    def test_malformed_repository(self, repository):
        with pytest.raises(MalformedPayload, match="repository"):
            self.validator.validate(json.dumps(make_payload(repository=repository)))

    @pytest.mark.parametrize("field", ["pull_request", "repository"])
    def test_non_object_sections(self, field):
        with pytest.raises(MalformedPayload, match=field):
            self.validator.validate(json.dumps(make_payload(**{field: "x"})))
