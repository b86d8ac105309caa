"""Routers package."""

from member_stats.api.routers import health, skills, statistics


__all__ = ["health", "skills", "statistics"]
