"""Test factories for generating test data."""

from tests.factories.items import ItemFactory

__all__ = ["ItemFactory"]
