"""
Embedded configuration models

The deck markup carries a `var SLConfig = {...};` assignment describing the
deck for its own runtime. Reading it yields one of two variants:

    Structured - the payload parsed as a JSON object with a "deck" record;
                 slug, title and slide count can all be rewritten.
    RawText    - the payload could not be parsed; only the slug and title
                 can be substituted textually, slide count stays as is.
"""

from dataclasses import dataclass
from typing import Any, Dict, Union


@dataclass
class Structured:
    """
    Parsed embedded configuration

    Attributes:
        record: Decoded JSON object (contains a "deck" dict)
    """
    record: Dict[str, Any]


@dataclass
class RawText:
    """
    Unparsable embedded configuration, kept as the script's raw text

    Attributes:
        text: Full script content holding the assignment
    """
    text: str


EmbeddedConfig = Union[Structured, RawText]
