"""CLI commands for Jira to Pivotal CSV Tool."""

from .export import export

__all__ = ['export']
