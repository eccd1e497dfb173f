"""
Exception taxonomy for decksmith

All fatal conditions raised by library code derive from DeckError so the
CLI stages can report them uniformly and exit with status 1.
"""


class DeckError(Exception):
    """Base class for decksmith failures"""
    pass


class ConfigurationError(DeckError):
    """
    Raised for bad or missing inputs

    Examples: an invalid structure token, both --slides and --structure
    given, a missing template archive, or a deck without its markup entry.
    """
    pass


class ConflictError(DeckError):
    """Raised when the target deck directory already exists"""

    def __init__(self, path) -> None:
        self.path = path
        super().__init__(f"Deck folder already exists: {path}")
