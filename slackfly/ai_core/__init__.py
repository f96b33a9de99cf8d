# AI Core module

"""
AI Core Module - Language model calls for the digest pipeline.

Key responsibilities:
- Daily digest summaries of a channel's messages
- Quick recaps of recent messages
"""
