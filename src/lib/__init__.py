"""
decksmith - reveal.js deck scaffolding and finalization

Builds deck projects from a layout structure and a packaged template.
"""

__version__ = "1.0.0"

from .grammar import structure_parse
from .compiler import Compiler
from .materializer import TemplateMaterializer, slug_generate
from .customizer import DeckCustomizer
from .finalize import FinalizationPipeline
from .errors import DeckError, ConfigurationError, ConflictError
from .log import LOG, WARN, state_connectToLogger

__all__ = [
    "structure_parse",
    "Compiler",
    "TemplateMaterializer",
    "slug_generate",
    "DeckCustomizer",
    "FinalizationPipeline",
    "DeckError",
    "ConfigurationError",
    "ConflictError",
    "LOG",
    "WARN",
    "state_connectToLogger",
    "__version__",
]
