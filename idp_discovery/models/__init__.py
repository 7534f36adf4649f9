"""
Database models
"""

from .database import Base, DiscoverySessionEntry

__all__ = ["Base", "DiscoverySessionEntry"]
