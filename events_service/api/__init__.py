"""HTTP API package."""

from .app import create_application, API_PREFIX

__all__ = ['create_application', 'API_PREFIX']
