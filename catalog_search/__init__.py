"""catalog-search: GitHub-style search queries over a product catalog."""

__version__ = "0.1.0"
