"""Dialogue engines."""

from .base import DEFAULT_MAX_STEPS, BaseDialogueEngine, IDialogueEngine, parse_step
from .llm import LLMDialogueEngine
from .wit import WitEngine

__all__ = [
    "DEFAULT_MAX_STEPS",
    "BaseDialogueEngine",
    "IDialogueEngine",
    "parse_step",
    "LLMDialogueEngine",
    "WitEngine",
]
