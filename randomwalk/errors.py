# randomwalk/errors.py
from __future__ import annotations


class InvalidParameter(ValueError):
    """Raised when a sampler or walk generator receives malformed input."""
