"""
Core package initialisation for bluemap.

Deliberately kept lightweight: configuration, logging and the error
hierarchy only.
"""

from bluemap.core.errors import (
    BluemapError,
    NotFoundError,
    TypeMismatchError,
)

__all__ = [
    "BluemapError",
    "NotFoundError",
    "TypeMismatchError",
]
