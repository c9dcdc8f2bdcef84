"""Repositories for DynamoDB data access."""

from sespress.repositories.settings import SettingsRepository

__all__ = ["SettingsRepository"]
