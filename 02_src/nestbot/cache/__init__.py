"""Cache module."""

from .derived import DerivedDataCache, IDerivedDataCache

__all__ = ["DerivedDataCache", "IDerivedDataCache"]
