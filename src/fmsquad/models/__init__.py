"""Shared player models."""

from .player import PlayerAttribute, PlayerRecord

__all__ = ["PlayerAttribute", "PlayerRecord"]
