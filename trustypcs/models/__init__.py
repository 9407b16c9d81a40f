"""Database models."""

from trustypcs.models.setting import Setting

__all__ = [
    "Setting",
]
