"""
Layout descriptor and compiled deck models

A layout descriptor is an ordered sequence of slide groups. Each group is
one of three variants: a Single slide, a section Divider, or a vertical
Stack of n slides sharing one horizontal position.
"""

from dataclasses import dataclass
from typing import List, Union


@dataclass(frozen=True)
class Single:
    """
    One horizontal slide

    The first Single rendered at horizontal position 1 becomes the deck's
    title slide.
    """

    def slideCount_get(self) -> int:
        return 1


@dataclass(frozen=True)
class Divider:
    """Section-break slide; numbered in order of appearance when rendered"""

    def slideCount_get(self) -> int:
        return 1


@dataclass(frozen=True)
class Stack:
    """
    Vertical group of slides nested under one horizontal position

    Attributes:
        size: Number of vertical slides (>= 1)
    """
    size: int

    def __post_init__(self) -> None:
        if self.size < 1:
            raise ValueError(f"Stack size must be a positive integer, got {self.size}")

    def slideCount_get(self) -> int:
        return self.size


SlideGroup = Union[Single, Divider, Stack]
LayoutDescriptor = List[SlideGroup]


def slideCount_compute(layout: LayoutDescriptor) -> int:
    """
    Structural slide count of a layout

    Singles and dividers count one each, a Stack(n) counts n.
    """
    return sum(group.slideCount_get() for group in layout)


def layout_describe(layout: LayoutDescriptor, divider_token: str = "d") -> str:
    """
    Render a layout back into its comma-separated structure form

    Example:
        >>> layout_describe([Single(), Divider(), Stack(3)])
        '1,d,3'
    """
    tokens: List[str] = []
    for group in layout:
        if isinstance(group, Divider):
            tokens.append(divider_token)
        elif isinstance(group, Stack):
            tokens.append(str(group.size))
        else:
            tokens.append("1")
    return ",".join(tokens)


@dataclass
class CompiledDeck:
    """
    Result of compiling a layout descriptor to slide markup

    Attributes:
        markup: Slide sections, ready to insert into the deck's .slides container
        slide_count: Structural slide count of the source layout
        ids: Identifiers assigned to rendered units, in document order
             (e.g., ["title", "slide-2", "divider-1", "slide-4-1", ...])
    """
    markup: str
    slide_count: int
    ids: List[str]
