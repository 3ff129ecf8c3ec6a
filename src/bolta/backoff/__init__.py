r"""Backoff strategies for retry delays.

This package provides the backoff strategies available to a retry
policy: fixed, random and exponential.
"""

from __future__ import annotations

__all__ = [
    "BaseBackoffStrategy",
    "ExponentialBackoff",
    "FixedBackoff",
    "RandomBackoff",
]

from bolta.backoff.base import BaseBackoffStrategy
from bolta.backoff.exponential import ExponentialBackoff
from bolta.backoff.fixed import FixedBackoff
from bolta.backoff.randomized import RandomBackoff
