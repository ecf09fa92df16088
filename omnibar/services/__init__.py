# Omnibar Services Package
"""
Backend services for the Omnibar core.

Services handle persistence that outlives a single query generation.
"""

from .frecency import FrecencyService

__all__ = ["FrecencyService"]
