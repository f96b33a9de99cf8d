from slackfly.ai_core.summarization.summarizer import DigestSummarizer, SummarizationError

__all__ = ["DigestSummarizer", "SummarizationError"]
