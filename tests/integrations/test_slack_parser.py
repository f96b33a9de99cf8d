"""
Tests for the Slack history parser.
"""

import pytest
from slackfly.integrations.slack.parser import (
    MessagePage,
    is_content_message,
    parse_history_page,
)


class TestIsContentMessage:
    """Test suite for content filtering."""

    def test_plain_user_message(self):
        assert is_content_message({"type": "message", "ts": "1.0", "user": "U1", "text": "hi"})

    def test_thread_broadcast_is_content(self):
        raw = {"type": "message", "subtype": "thread_broadcast", "ts": "1.0", "user": "U1", "text": "hi"}
        assert is_content_message(raw)

    @pytest.mark.parametrize(
        "raw",
        [
            {"type": "message", "ts": "1.0", "user": "U1", "text": "hi", "bot_id": "B1"},
            {"type": "message", "subtype": "channel_join", "ts": "1.0", "user": "U1", "text": "<@U1> has joined"},
            {"type": "message", "ts": "1.0", "user": "U1", "text": ""},
            {"type": "message", "ts": "1.0", "user": "U1"},
            {"type": "message", "ts": "1.0", "text": "no author"},
            {"type": "reaction_added", "ts": "1.0", "user": "U1", "text": "x"},
        ],
    )
    def test_non_content_events(self, raw):
        assert not is_content_message(raw)


class TestParseHistoryPage:
    """Test suite for conversations.history parsing."""

    def test_page_with_cursor(self):
        response = {
            "ok": True,
            "messages": [
                {"type": "message", "ts": "1706123400.123456", "user": "U1", "text": "first", "thread_ts": "1706123400.123456"},
                {"type": "message", "ts": "1706123300.654321", "user": "B1", "text": "deploy done", "bot_id": "B1"},
            ],
            "has_more": True,
            "response_metadata": {"next_cursor": "bmV4dA=="},
        }

        page = parse_history_page(response)

        assert isinstance(page, MessagePage)
        assert [msg.ts for msg in page.messages] == ["1706123400.123456"]
        assert page.messages[0].thread_ts == "1706123400.123456"
        assert page.next_cursor == "bmV4dA=="
        assert page.has_more is True

    def test_last_page_has_no_cursor(self):
        page = parse_history_page(
            {"ok": True, "messages": [], "has_more": False, "response_metadata": {"next_cursor": ""}}
        )

        assert page.messages == []
        assert page.next_cursor is None
        assert page.has_more is False

    def test_missing_fields(self):
        page = parse_history_page({"ok": True})

        assert page == MessagePage()
