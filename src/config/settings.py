"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use DECKSMITH_ prefix (e.g., DECKSMITH_DEFAULT_SLIDE_COUNT=8).

Settings can also be loaded from a .env file in the project root.
"""

from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


PACKAGE_ROOT = Path(__file__).parent.parent


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use DECKSMITH_ prefix.

    Examples:
        DECKSMITH_TEMPLATE_ARCHIVE=/opt/decks/template.zip
        DECKSMITH_CANONICAL_STYLESHEET=lib/offline-v2.css
        DECKSMITH_EPHEMERAL_ARTIFACTS='["screenshots", "output.pdf"]'
    """

    model_config = SettingsConfigDict(
        env_prefix="DECKSMITH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Template configuration
    template_archive: Path = Field(
        default=PACKAGE_ROOT / "assets" / "template.zip",
        description="Packaged template archive that new decks are extracted from",
    )

    # Project layout
    deck_prefix: str = Field(
        default="deck-",
        description="Prefix joined to the slug to name a deck directory",
    )

    markup_entry: str = Field(
        default="index.html",
        description="Markup entry file at the top of the template and of every deck",
    )

    asset_library: str = Field(
        default="lib",
        description="Asset-library subtree copied verbatim from the template",
    )

    canonical_stylesheet: str = Field(
        default="lib/offline-v2.css",
        description="Stylesheet (relative to the deck) that finalization merges into",
    )

    assets_dirname: str = Field(
        default="assets",
        description="Standard asset directory ensured by finalization",
    )

    ephemeral_artifacts: List[str] = Field(
        default=["screenshots", "output.pdf"],
        description="Build outputs removed by finalization (files or directories)",
    )

    # Structure / markup configuration
    config_marker: str = Field(
        default="SLConfig",
        description="Name of the embedded configuration assignment in the markup",
    )

    divider_token: str = Field(
        default="d",
        description="Structure token denoting a section divider",
    )

    default_slide_count: int = Field(
        default=5,
        description="Number of single slides when no structure is given",
    )

    slug_bytes: int = Field(
        default=3,
        description="Random bytes in a generated slug (rendered as hex)",
    )

    def deckDirname_make(self, slug: str) -> str:
        """
        Generate the deck directory name for a slug.

        Example:
            >>> AppSettings().deckDirname_make('c2bbd4')
            'deck-c2bbd4'
        """
        return f"{self.deck_prefix}{slug}"

    def canonicalStylesheet_name(self) -> str:
        """Basename of the canonical stylesheet (e.g., 'offline-v2.css')"""
        return Path(self.canonical_stylesheet).name


# Singleton instance - import this in your code
appsettings = AppSettings()
