"""Generation module - produce test artifacts before a run."""

from .trigger import CommandGenerationTrigger, GenerationTrigger

__all__ = ["CommandGenerationTrigger", "GenerationTrigger"]
