"""
Structure grammar for deck layouts

Turns either a plain slide count or a comma-separated structure string into
a LayoutDescriptor:

    "1"  -> Single
    "n"  -> Stack(n) for n > 1
    "d"  -> Divider

Examples:
    >>> structure_parse(slides=3)
    [Single(), Single(), Single()]
    >>> structure_parse(structure="1,d,3,1")
    [Single(), Divider(), Stack(size=3), Single()]
"""

from typing import List, Optional, Union

from ..config import appsettings
from ..models.structure import Single, Divider, Stack, SlideGroup, LayoutDescriptor
from .errors import ConfigurationError


def token_parse(token: str, divider_token: Optional[str] = None) -> SlideGroup:
    """
    Parse a single structure token

    Args:
        token: Raw token (surrounding whitespace is ignored)
        divider_token: Marker for section dividers (default from settings)

    Returns:
        The slide group the token denotes

    Raises:
        ConfigurationError: If the token is neither the divider marker
                            nor a positive integer
    """
    divider = divider_token if divider_token is not None else appsettings.divider_token
    text = token.strip()

    if text == divider:
        return Divider()

    if not (text.isascii() and text.isdigit()) or int(text) < 1:
        raise ConfigurationError(
            f"Structure values must be positive integers or \"{divider}\" for dividers: "
            f"invalid token '{token}'"
        )

    count = int(text)

    return Single() if count == 1 else Stack(count)


def structureString_parse(structure: str, divider_token: Optional[str] = None) -> LayoutDescriptor:
    """Parse a comma-separated structure string into a LayoutDescriptor"""
    return [token_parse(token, divider_token) for token in structure.split(",")]


def slideCount_validate(slides: Union[int, str]) -> int:
    """Coerce and validate a plain slide count"""
    if isinstance(slides, str) and not (slides.strip().isascii() and slides.strip().isdigit()):
        raise ConfigurationError(f"Slide count must be at least 1: invalid value '{slides}'")
    try:
        count = int(slides)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Slide count must be at least 1: invalid value '{slides}'") from None
    if count < 1:
        raise ConfigurationError(f"Slide count must be at least 1: invalid value '{slides}'")
    return count


def structure_parse(
    slides: Optional[Union[int, str]] = None,
    structure: Optional[str] = None,
    divider_token: Optional[str] = None,
) -> LayoutDescriptor:
    """
    Build a LayoutDescriptor from a plain count or an explicit structure

    The two forms are mutually exclusive. Supplying neither yields the
    default layout of `appsettings.default_slide_count` single slides.

    Args:
        slides: Plain slide count N (sugar for N Single groups)
        structure: Comma-separated token list (e.g., "1,1,d,3,1")
        divider_token: Marker for section dividers (default from settings)

    Returns:
        Ordered list of slide groups

    Raises:
        ConfigurationError: Both forms given, or an invalid count/token
    """
    if slides is not None and structure is not None:
        raise ConfigurationError("Cannot use both --slides and --structure. Choose one.")

    if structure is not None:
        return structureString_parse(structure, divider_token)

    count = slideCount_validate(slides) if slides is not None else appsettings.default_slide_count
    layout: List[SlideGroup] = [Single() for _ in range(count)]
    return layout
