"""
Deck customization

Rewrites a freshly materialized template's markup entry:

1. Replaces the content of the `.slides` container with compiled slide markup
2. Sets the document <title>
3. Updates the embedded `var SLConfig = {...};` block

The embedded block is read into one of two variants (see models.embedded).
A Structured config gets slug, title and slide_count rewritten and is
re-serialized as indented JSON. A RawText config only gets its slug and
title substituted in place; its slide_count is left stale and a warning
is logged.

The document is parsed with BeautifulSoup only to locate these three
elements; the new text is spliced into the original source so the rest of
the template keeps its formatting, attribute order and entities.
"""

import html as htmllib
import json
import re
from pathlib import Path
from typing import List, Optional, Tuple, Union

from bs4 import BeautifulSoup, Tag

from ..config import appsettings
from ..models.embedded import EmbeddedConfig, RawText, Structured
from ..models.structure import CompiledDeck, LayoutDescriptor
from .compiler import Compiler
from .errors import ConfigurationError
from .log import LOG, WARN


# Rest of a start tag after "<name", quoted attribute values may hold ">"
TAG_REST = r"""(?:"[^"]*"|'[^']*'|[^'">])*>"""

RAW_TEXT_ELEMENTS = {"script", "style", "title", "textarea"}


def offset_locate(html: str, line: int, column: int) -> int:
    """Character offset of a 1-based line / 0-based column position"""
    offset = 0
    for _ in range(line - 1):
        offset = html.index("\n", offset) + 1
    return offset + column


def innerSpan_find(html: str, element: Tag) -> Tuple[int, int]:
    """
    Offsets of an element's inner text within the source it was parsed from

    Uses the start position html.parser records on each tag, then finds the
    matching end tag in the source text.

    Returns:
        (start, end) such that html[start:end] is the element's content
    """
    start = offset_locate(html, element.sourceline, element.sourcepos)
    open_tag = re.compile(TAG_REST).match(html, start + 1 + len(element.name))
    if open_tag is None:
        raise ConfigurationError(f"Malformed <{element.name}> tag in template markup")
    inner_start = open_tag.end()

    if element.name in RAW_TEXT_ELEMENTS:
        close = re.compile(rf"</{element.name}\s*>", re.IGNORECASE).search(html, inner_start)
        if close is None:
            raise ConfigurationError(f"Unclosed <{element.name}> in template markup")
        return inner_start, close.start()

    depth = 1
    tag_pattern = re.compile(rf"<(/?){element.name}\b{TAG_REST}", re.IGNORECASE)
    for match in tag_pattern.finditer(html, inner_start):
        if match.group(1):
            depth -= 1
            if depth == 0:
                return inner_start, match.start()
        elif not match.group(0).endswith("/>"):
            depth += 1
    raise ConfigurationError(f"Unclosed <{element.name}> in template markup")


def assignment_pattern(marker: str) -> "re.Pattern[str]":
    """Pattern matching `var <marker> = {...};` with the object as group 1"""
    return re.compile(rf"var {re.escape(marker)} = ({{[\s\S]*?}});")


def config_read(script_text: str, marker: Optional[str] = None) -> Optional[EmbeddedConfig]:
    """
    Read the embedded configuration from a script's text

    Args:
        script_text: Full text of the <script> holding the assignment
        marker: Assignment name (default from settings)

    Returns:
        Structured if the payload is a JSON object with a "deck" object,
        RawText if it is not, or None if no assignment is present
    """
    match = assignment_pattern(marker or appsettings.config_marker).search(script_text)
    if not match:
        return None

    try:
        record = json.loads(match.group(1))
    except json.JSONDecodeError as e:
        LOG(f"Embedded config is not valid JSON: {e}", level=2)
        return RawText(script_text)

    if not isinstance(record, dict) or not isinstance(record.get("deck"), dict):
        LOG("Embedded config has no \"deck\" record", level=2)
        return RawText(script_text)

    return Structured(record)


def config_update(
    config: EmbeddedConfig,
    script_text: str,
    slug: str,
    title: str,
    slide_count: int,
    marker: Optional[str] = None,
) -> str:
    """
    Apply slug/title/slide_count to an embedded config

    Args:
        config: Variant returned by config_read()
        script_text: Full text of the <script> holding the assignment
        slug: Deck slug (written as deck-<slug>)
        title: Presentation title
        slide_count: Structural slide count
        marker: Assignment name (default from settings)

    Returns:
        Updated script text
    """
    marker = marker or appsettings.config_marker
    deck_slug = appsettings.deckDirname_make(slug)

    if isinstance(config, Structured):
        deck = config.record["deck"]
        deck["slug"] = deck_slug
        deck["title"] = title
        deck["slide_count"] = slide_count
        serialized = json.dumps(config.record, indent=2, ensure_ascii=False)
        return assignment_pattern(marker).sub(
            lambda _: f"var {marker} = {serialized};", script_text, count=1
        )

    WARN(f"Embedded {marker} could not be parsed; updating slug and title only")
    text = re.sub(
        r'"slug"\s*:\s*"[^"]*"',
        lambda _: f'"slug":{json.dumps(deck_slug)}',
        config.text,
        count=1,
    )
    text = re.sub(
        r'"title"\s*:\s*"(?:[^"\\]|\\.)*"',
        lambda _: f'"title":{json.dumps(title, ensure_ascii=False)}',
        text,
        count=1,
    )
    return text


class DeckCustomizer:
    """
    Customizes a deck's markup entry in place
    """

    def __init__(self, markup_entry: Optional[str] = None, marker: Optional[str] = None) -> None:
        """
        Initialize customizer

        Args:
            markup_entry: Markup file name inside the deck (default from settings)
            marker: Embedded config assignment name (default from settings)
        """
        self.markup_entry = markup_entry or appsettings.markup_entry
        self.marker = marker or appsettings.config_marker

    def markup_customize(self, html: str, title: str, slug: str, deck: CompiledDeck) -> str:
        """
        Return `html` with slides, title and embedded config replaced

        Only the inner text of the `.slides` container, the <title> and the
        embedded config script is rewritten; every other byte of `html` is
        kept as is.

        Raises:
            ConfigurationError: If the markup has no `.slides` container
        """
        soup = BeautifulSoup(html, "html.parser")
        edits: List[Tuple[int, int, str]] = []

        container = soup.select_one(".slides")
        if container is None:
            raise ConfigurationError("Template markup has no .slides container")

        start, end = innerSpan_find(html, container)
        inner = html[start:end]
        trailing = inner[len(inner.rstrip()):]
        closing_indent = trailing.rsplit("\n", 1)[-1] if "\n" in trailing else ""
        edits.append((start, end, "\n" + deck.markup + closing_indent))
        LOG(f"Inserted {len(deck.ids)} slide sections", level=2)

        escaped_title = htmllib.escape(title, quote=False)
        if soup.title is not None:
            start, end = innerSpan_find(html, soup.title)
            edits.append((start, end, escaped_title))
        elif soup.head is not None:
            _, end = innerSpan_find(html, soup.head)
            edits.append((end, end, f"<title>{escaped_title}</title>"))

        for script in soup.find_all("script"):
            if container in script.parents:
                continue
            script_text = script.string or ""
            if self.marker not in script_text:
                continue
            config = config_read(script_text, self.marker)
            if config is not None:
                start, end = innerSpan_find(html, script)
                edits.append((start, end, config_update(
                    config, html[start:end], slug, title, deck.slide_count, self.marker
                )))
                LOG(f"Updated embedded {self.marker} ({type(config).__name__})", level=2)
            break
        else:
            LOG(f"No embedded {self.marker} block found", level=2)

        for start, end, replacement in sorted(edits, reverse=True):
            html = html[:start] + replacement + html[end:]
        return html

    def customize(
        self,
        deck_path: Union[str, Path],
        title: str,
        slug: str,
        layout: LayoutDescriptor,
    ) -> CompiledDeck:
        """
        Rewrite the deck's markup entry for `layout`

        Args:
            deck_path: Project directory produced by TemplateMaterializer
            title: Presentation title
            slug: Deck slug
            layout: Parsed layout descriptor

        Returns:
            The CompiledDeck that was inserted
        """
        index_path = Path(deck_path) / self.markup_entry
        if not index_path.is_file():
            raise ConfigurationError(f"{self.markup_entry} not found in {deck_path}")

        LOG("Customizing template HTML...", level=1)
        deck = Compiler(layout).compile()
        html = index_path.read_text(encoding="utf-8")
        index_path.write_text(self.markup_customize(html, title, slug, deck), encoding="utf-8")
        return deck
