"""
Template materialization

Extracts the packaged template archive into a fresh deck-<slug> project
directory. Only the whitelisted top-level entries (the markup entry and the
asset library) are moved into the project; anything else in the archive is
left in the scratch directory and discarded with it.

The scratch directory lives inside the output directory so the whitelisted
entries move by rename, and it is removed on every exit path. A failure to
remove it is logged, never raised.
"""

import secrets
import shutil
import tempfile
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Union

from ..config import appsettings
from .errors import ConfigurationError, ConflictError
from .log import LOG, WARN


def slug_generate(nbytes: Optional[int] = None) -> str:
    """
    Generate a random lowercase hex slug

    Args:
        nbytes: Random bytes to draw (default from settings: 3 -> 6 hex chars)
    """
    return secrets.token_hex(nbytes if nbytes is not None else appsettings.slug_bytes)


@contextmanager
def scratch_directory(parent: Path) -> Iterator[Path]:
    """
    Scoped scratch directory under `parent`

    Yields the directory path and removes it when the block exits,
    whether it exits normally or by exception.
    """
    scratch = Path(tempfile.mkdtemp(prefix=".extract-", dir=parent))
    LOG(f"Scratch directory: {scratch}", level=3)
    try:
        yield scratch
    finally:
        try:
            shutil.rmtree(scratch)
        except OSError as e:
            WARN(f"Could not remove scratch directory {scratch}: {e}")


class TemplateMaterializer:
    """
    Creates deck project directories from a template archive

    The archive location is injected at construction so tests and callers
    can point at any archive; it defaults to the configured packaged
    template.
    """

    def __init__(
        self,
        template_archive: Optional[Union[str, Path]] = None,
        entries: Optional[List[str]] = None,
    ) -> None:
        """
        Initialize materializer

        Args:
            template_archive: Path to the template .zip (default from settings)
            entries: Whitelisted top-level entries to keep
                     (default: markup entry and asset library from settings)
        """
        self.template_archive = Path(template_archive or appsettings.template_archive)
        self.entries = entries or [appsettings.markup_entry, appsettings.asset_library]

    def archive_check(self) -> Path:
        """
        Verify the template archive exists and is a zip file

        Raises:
            ConfigurationError: If the archive is missing or unreadable
        """
        if not self.template_archive.is_file():
            raise ConfigurationError(f"Template zip not found at {self.template_archive}")
        if not zipfile.is_zipfile(self.template_archive):
            raise ConfigurationError(f"Template archive is not a zip file: {self.template_archive}")
        return self.template_archive

    def deckPath_resolve(self, slug: str, output_dir: Union[str, Path]) -> Path:
        """Path of the project directory for `slug` under `output_dir`"""
        return Path(output_dir) / appsettings.deckDirname_make(slug)

    def materialize(self, slug: str, output_dir: Union[str, Path]) -> Path:
        """
        Extract the template into output_dir/deck-<slug>

        Args:
            slug: Deck slug
            output_dir: Directory that will hold the project (created if absent)

        Returns:
            Path to the new project directory

        Raises:
            ConfigurationError: Missing template archive, or an archive
                                without a whitelisted entry
            ConflictError: The project directory already exists
        """
        self.archive_check()

        output_dir = Path(output_dir)
        deck_path = self.deckPath_resolve(slug, output_dir)
        if deck_path.exists():
            raise ConflictError(deck_path)

        output_dir.mkdir(parents=True, exist_ok=True)

        LOG(f"Extracting template to {deck_path.name}...", level=1)
        with scratch_directory(output_dir) as scratch:
            with zipfile.ZipFile(self.template_archive) as archive:
                archive.extractall(scratch)

            missing = [entry for entry in self.entries if not (scratch / entry).exists()]
            if missing:
                raise ConfigurationError(
                    f"Template archive {self.template_archive} is missing: {', '.join(missing)}"
                )

            discarded = sorted(p.name for p in scratch.iterdir() if p.name not in self.entries)
            if discarded:
                LOG(f"Discarding extra template entries: {', '.join(discarded)}", level=2)

            # Non-recursive mkdir: a concurrent run that created it first wins
            try:
                deck_path.mkdir()
            except FileExistsError:
                raise ConflictError(deck_path) from None

            for entry in self.entries:
                shutil.move(str(scratch / entry), str(deck_path / entry))
                LOG(f"Moved {entry} into {deck_path.name}", level=3)

        return deck_path
