# Omnibar Package
"""
Query-to-result core of a desktop command palette.

Layers:
  - search: providers, aggregation, ranking, query session
  - actions: dispatch of the selected result's action
  - services: persistent usage tracking
"""

__version__ = "0.1.0"
