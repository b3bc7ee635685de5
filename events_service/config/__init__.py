"""Configuration package initialization."""

from .settings import IS_PRODUCTION_ENVIRONMENT, Settings

__all__ = ['IS_PRODUCTION_ENVIRONMENT', 'Settings']
