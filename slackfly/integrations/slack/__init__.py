# Slack integration module
from slackfly.integrations.slack.client import SlackClient
from slackfly.integrations.slack.parser import MessagePage, parse_history_page, is_content_message

__all__ = ["SlackClient", "MessagePage", "parse_history_page", "is_content_message"]
