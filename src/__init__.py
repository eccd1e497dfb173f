"""
decksmith - reveal.js deck scaffolding and finalization

Creates self-contained presentation projects from a layout structure and a
packaged template, then consolidates styling before distribution.
"""

__version__ = "1.0.0"

from .lib import (
    structure_parse,
    Compiler,
    TemplateMaterializer,
    DeckCustomizer,
    FinalizationPipeline,
    LOG,
    state_connectToLogger,
)

__all__ = [
    "structure_parse",
    "Compiler",
    "TemplateMaterializer",
    "DeckCustomizer",
    "FinalizationPipeline",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
