"""Infrastructure adapter exports."""

from skill_engine.core.exceptions import ContentFetchError  # noqa: F401

from .content import ContentService

__all__ = ["ContentService", "ContentFetchError"]
