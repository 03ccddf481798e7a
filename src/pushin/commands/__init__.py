"""CLI commands for pushin."""

from .rewards import rewards
from .session import session
from .simulate import simulate

__all__ = [
    "rewards",
    "session",
    "simulate",
]
