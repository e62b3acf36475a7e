"""Shared helpers for catalog-search."""
