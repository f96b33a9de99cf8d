"""Slack Fly - daily Slack channel digests."""

__version__ = "0.1.0"
