"""
Slide markup compiler tests

Identifier assignment, title-slide rule, and the slide-count invariant.
"""

import pytest
from bs4 import BeautifulSoup

from decksmith.lib.compiler import Compiler
from decksmith.lib.grammar import structure_parse
from decksmith.models.structure import Single, Divider, Stack


def leaf_sections(markup: str):
    """<section> elements that contain no nested <section>"""
    soup = BeautifulSoup(markup, "html.parser")
    return [s for s in soup.find_all("section") if s.find("section") is None]


class TestIdentifiers:
    """Stable, unique ids per rendered unit"""

    def test_mixed_structure_ids(self):
        deck = Compiler(structure_parse(structure="1,d,3,1")).compile()
        assert deck.ids == ["title", "divider-1", "slide-3-1", "slide-3-2", "slide-3-3", "slide-4"]

    def test_dividers_numbered_in_order(self):
        deck = Compiler([Single(), Divider(), Single(), Divider()]).compile()
        assert deck.ids == ["title", "divider-1", "slide-3", "divider-2"]
        assert "Section 2 Title" in deck.markup

    def test_ids_unique(self):
        deck = Compiler(structure_parse(structure="1,1,d,3,1,d,2,1")).compile()
        assert len(deck.ids) == len(set(deck.ids))

    def test_recompile_is_identical(self):
        layout = structure_parse(structure="1,d,2,1")
        compiler = Compiler(layout)
        first = compiler.compile()
        second = compiler.compile()
        assert first.markup == second.markup
        assert first.ids == second.ids


class TestTitleSlide:
    """Only the Single at horizontal position 1 is a title slide"""

    def test_first_single_is_title(self):
        markup = Compiler([Single(), Single(), Single()]).compile().markup
        soup = BeautifulSoup(markup, "html.parser")
        sections = soup.find_all("section")
        assert sections[0]["id"] == "title"
        assert "section-divider" in sections[0]["class"]
        assert sections[0].h1.get_text() == "Presentation Title"
        for section in sections[1:]:
            assert not section.get("class")
            assert section.h2 is not None

    def test_leading_divider_means_no_title(self):
        deck = Compiler([Divider(), Single()]).compile()
        assert "title" not in deck.ids
        assert deck.ids == ["divider-1", "slide-2"]

    def test_leading_stack_means_no_title(self):
        deck = Compiler([Stack(2), Single()]).compile()
        assert deck.ids == ["slide-1-1", "slide-1-2", "slide-2"]


class TestStacks:
    """Vertical stacks consume one horizontal position"""

    def test_stack_nested_in_one_container(self):
        markup = Compiler([Single(), Stack(3)]).compile().markup
        soup = BeautifulSoup(markup, "html.parser")
        top_level = soup.find_all("section", recursive=False)
        assert len(top_level) == 2
        assert len(top_level[1].find_all("section")) == 3
        assert top_level[1].get("id") is None
        assert "Slide 2.3 Title Here" in markup


class TestSlideCountInvariant:
    """slide_count equals the number of emitted leaf slides"""

    @pytest.mark.parametrize(
        "structure",
        ["1", "d", "5", "1,d,3,1", "1,1,d,3,1,d,1", "d,d,d", "2,2,2", "1,1,1,1,1,1,1,1"],
    )
    def test_count_matches_leaves(self, structure):
        deck = Compiler(structure_parse(structure=structure)).compile()
        assert deck.slide_count == len(leaf_sections(deck.markup))
        assert deck.slide_count == len(deck.ids)

    def test_example_structure(self):
        deck = Compiler(structure_parse(structure="1,d,3,1")).compile()
        soup = BeautifulSoup(deck.markup, "html.parser")
        assert deck.slide_count == 6
        assert len(soup.select('section[id^="divider-"]')) == 1
        stacks = [s for s in soup.find_all("section", recursive=False) if s.find("section")]
        assert len(stacks) == 1
        assert len(stacks[0].find_all("section")) == 3
