"""Checkpointing for resumable runs."""

from .manager import CheckpointManager

__all__ = ['CheckpointManager']
