"""
Pydantic schemas for settings validation and API contracts.
"""

from .settings import AffiliateSettingsSchema, MatchRequest

__all__ = [
    'AffiliateSettingsSchema',
    'MatchRequest',
]
