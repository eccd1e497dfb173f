"""
Compiler for deck layouts to slide markup

Transforms a LayoutDescriptor into the nested <section> markup that goes
inside a reveal.js `.slides` container.

Horizontal positions start at 1. The Single at position 1 is the deck's
title slide; every divider, single and stack consumes one horizontal
position. Stacks render an outer <section> holding one inner <section>
per vertical slide.

Example:
    >>> deck = Compiler([Single(), Divider(), Stack(2)]).compile()
    >>> deck.ids
    ['title', 'divider-1', 'slide-3-1', 'slide-3-2']
    >>> deck.slide_count
    4
"""

from typing import List

from ..models.structure import (
    Single,
    Divider,
    Stack,
    SlideGroup,
    LayoutDescriptor,
    CompiledDeck,
    slideCount_compute,
)
from .log import LOG


INDENT = "\t"
BASE_DEPTH = 3


class Compiler:
    """
    Compiles a LayoutDescriptor to deck markup

    Responsibilities:
    - Assign stable identifiers (title, slide-<h>, slide-<h>-<v>, divider-<k>)
    - Emit placeholder headings for each slide
    - Report the structural slide count

    Compilation is a pure function of the layout: compiling the same
    layout twice yields identical markup and identifiers.
    """

    def __init__(self, layout: LayoutDescriptor) -> None:
        """
        Initialize compiler

        Args:
            layout: Parsed, validated layout descriptor
        """
        self.layout = layout
        self.h_index = 1
        self.divider_count = 1
        self.ids: List[str] = []

    def compile(self) -> CompiledDeck:
        """
        Compile the layout to markup

        Returns:
            CompiledDeck with markup, slide count and identifiers
        """
        self.h_index = 1
        self.divider_count = 1
        self.ids = []

        parts = [self.group_compile(group) for group in self.layout]
        slide_count = slideCount_compute(self.layout)

        LOG(f"Compiled {len(self.layout)} groups into {slide_count} slides", level=2)

        return CompiledDeck(markup="".join(parts), slide_count=slide_count, ids=list(self.ids))

    def group_compile(self, group: SlideGroup) -> str:
        """Dispatch a slide group to its renderer and advance the horizontal index"""
        if isinstance(group, Divider):
            html = self.divider_compile()
        elif isinstance(group, Stack):
            html = self.stack_compile(group.size)
        elif isinstance(group, Single):
            html = self.single_compile()
        else:
            raise TypeError(f"Unknown slide group: {group!r}")

        self.h_index += 1
        return html

    def divider_compile(self) -> str:
        """Section divider numbered by the running divider counter"""
        slide_id = f"divider-{self.divider_count}"
        html = self.section_make(
            slide_id,
            f"<h1>Section {self.divider_count} Title</h1>",
            BASE_DEPTH,
            divider=True,
        )
        self.divider_count += 1
        return html

    def single_compile(self) -> str:
        """Title slide at horizontal position 1, ordinary slide elsewhere"""
        if self.h_index == 1:
            return self.section_make("title", "<h1>Presentation Title</h1>", BASE_DEPTH, divider=True)

        return self.section_make(
            f"slide-{self.h_index}",
            f"<h2>Slide {self.h_index} Title Here</h2>",
            BASE_DEPTH,
        )

    def stack_compile(self, size: int) -> str:
        """Vertical stack of `size` slides under one horizontal position"""
        outer = INDENT * BASE_DEPTH
        html = f"{outer}<section>\n"
        for v_index in range(1, size + 1):
            html += self.section_make(
                f"slide-{self.h_index}-{v_index}",
                f"<h2>Slide {self.h_index}.{v_index} Title Here</h2>",
                BASE_DEPTH + 1,
            )
        html += f"{outer}</section>\n"
        return html

    def section_make(self, slide_id: str, heading: str, depth: int, divider: bool = False) -> str:
        """
        Render a leaf <section> with a single heading

        Args:
            slide_id: Identifier for the section's id attribute
            heading: Inner heading markup
            depth: Indentation depth in tabs
            divider: Apply the section-divider styling
        """
        self.ids.append(slide_id)

        attrs = f'id="{slide_id}"'
        if divider:
            attrs += ' class="section-divider" data-state="is-section-divider"'

        indent = INDENT * depth
        return (
            f"{indent}<section {attrs}>\n"
            f"{indent}{INDENT}{heading}\n"
            f"{indent}</section>\n"
        )
