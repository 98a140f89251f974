"""Upload media through the platform's chunked protocol and publish a post."""

__version__ = "0.1.0"
