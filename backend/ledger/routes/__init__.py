"""Aggregate import for all API route modules."""

from . import transactions

__all__ = ["transactions"]
