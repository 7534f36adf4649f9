"""
idp-discovery

Session-backed sequencing of candidate identity-provider endpoints discovered
for a claimed identifier.
"""

__version__ = "0.1.0"
