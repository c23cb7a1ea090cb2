"""Neighborhood collaborative filtering over explicit ratings.

Core pieces:
- Damped item-mean baseline
- User-user and item-item cosine neighborhood scorers
- Weighted tag profiles for content-based scoring
"""
from __future__ import annotations

__version__ = "0.1.0"
