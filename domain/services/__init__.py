"""
Domain services containing pure business logic.
"""

from domain.services import odds_calculator

__all__ = ["odds_calculator"]
