"""newsproxy - news aggregation with LLM rewrites and tokenized image relay."""

__version__ = "0.1.0"
