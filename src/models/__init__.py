"""
Models package for decksmith

Contains data structures and type definitions for the deck pipelines.
"""

from .state import ProgramState, pipeline
from .structure import (
    Single,
    Divider,
    Stack,
    SlideGroup,
    LayoutDescriptor,
    CompiledDeck,
    slideCount_compute,
    layout_describe,
)
from .embedded import Structured, RawText, EmbeddedConfig
from .finalize import StepOutcome, FinalizeReport

__all__ = [
    "ProgramState",
    "pipeline",
    "Single",
    "Divider",
    "Stack",
    "SlideGroup",
    "LayoutDescriptor",
    "CompiledDeck",
    "slideCount_compute",
    "layout_describe",
    "Structured",
    "RawText",
    "EmbeddedConfig",
    "StepOutcome",
    "FinalizeReport",
]
