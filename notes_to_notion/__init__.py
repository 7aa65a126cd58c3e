"""
Utility package for exporting markdown notes into Notion.

Notes are converted to Notion blocks and created as child pages of a single
parent page. Uploads run concurrently under a shared rate limiter, and a
batch reports the pages it created alongside every note that failed.
"""
__all__ = [
    "blocks",
    "config",
    "errors",
    "exporter",
    "models",
    "notion_client",
    "parser",
    "rate_limiter",
]
