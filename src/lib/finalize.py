"""
Deck finalization

Post-creation pass run against an existing deck directory:

1. assets      - ensure the standard assets/ directory exists
2. stylesheets - merge loose *.css files from the deck root into the
                 canonical stylesheet, then delete them
3. links       - strip <link> references to stylesheets other than the
                 canonical one from the markup entry
4. artifacts   - remove ephemeral build outputs (screenshots/, output.pdf)

Each step runs even if an earlier one failed; failures are logged as
warnings and recorded in the FinalizeReport. Running the pipeline a second
time on the same deck changes nothing.
"""

import re
import shutil
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from ..config import appsettings
from ..models.finalize import FinalizeReport, StepOutcome
from .errors import ConfigurationError
from .log import LOG, WARN


STYLESHEET_LINK = re.compile(r"""<link[^>]*href=["'][^"']*\.css["'][^>]*>""", re.IGNORECASE)

CUSTOM_STYLES_BANNER = "\n\n/* === Custom Styles === */\n"


def stylesheetLinks_strip(html: str, keep: str) -> str:
    """
    Remove stylesheet <link> tags that do not reference `keep`

    Args:
        html: Markup text
        keep: Stylesheet path whose links are preserved (e.g., 'lib/offline-v2.css')
    """
    return STYLESHEET_LINK.sub(lambda m: m.group(0) if keep in m.group(0) else "", html)


class FinalizationPipeline:
    """
    Finalizes a deck directory in place
    """

    def __init__(self, deck_path: Union[str, Path]) -> None:
        """
        Initialize pipeline

        Args:
            deck_path: Project directory (deck-<slug>)
        """
        self.deck_path = Path(deck_path)
        self.index_path = self.deck_path / appsettings.markup_entry
        self.canonical_path = self.deck_path / appsettings.canonical_stylesheet

    def preconditions_check(self) -> None:
        """
        Raises:
            ConfigurationError: Deck directory or its markup entry is missing
        """
        if not self.deck_path.is_dir():
            raise ConfigurationError(f"Deck path does not exist: {self.deck_path}")
        if not self.index_path.is_file():
            raise ConfigurationError(f"{appsettings.markup_entry} not found in {self.deck_path}")

    def run(self) -> FinalizeReport:
        """
        Run all finalization steps in order

        Returns:
            FinalizeReport with one StepOutcome per step

        Raises:
            ConfigurationError: If preconditions fail (no step is run)
        """
        self.preconditions_check()
        LOG(f"Finalizing presentation: {self.deck_path}", level=1)

        steps: List[Tuple[str, Callable[[StepOutcome], None]]] = [
            ("assets", self.assets_ensure),
            ("stylesheets", self.stylesheets_merge),
            ("links", self.links_strip),
            ("artifacts", self.artifacts_remove),
        ]
        report = FinalizeReport()
        for name, step in steps:
            report.outcomes.append(self.step_run(name, step))
        return report

    def step_run(self, name: str, step: Callable[[StepOutcome], None]) -> StepOutcome:
        """Run one step, recording a failure instead of propagating it"""
        outcome = StepOutcome(step=name)
        try:
            step(outcome)
        except (OSError, ValueError) as e:
            outcome.ok = False
            outcome.messages.append(f"Step '{name}' failed: {e}")
            WARN(f"Finalize step '{name}' failed: {e}")
        for message in outcome.messages:
            LOG(message, level=2)
        return outcome

    def assets_ensure(self, outcome: StepOutcome) -> None:
        assets_path = self.deck_path / appsettings.assets_dirname
        if assets_path.is_dir():
            outcome.messages.append("Assets folder already exists")
            return
        assets_path.mkdir(parents=True, exist_ok=True)
        outcome.changed = True
        outcome.messages.append("Created assets folder")

    def looseStylesheets_find(self) -> List[Path]:
        """
        Stylesheets directly in the deck root, excluding the canonical one by name

        Subdirectories (including the asset library) are not scanned.
        """
        canonical_name = appsettings.canonicalStylesheet_name()
        return sorted(
            entry
            for entry in self.deck_path.iterdir()
            if entry.is_file() and entry.name.endswith(".css") and entry.name != canonical_name
        )

    def stylesheets_merge(self, outcome: StepOutcome) -> None:
        if not self.canonical_path.is_file():
            message = f"{appsettings.canonical_stylesheet} not found, skipping CSS integration"
            WARN(message)
            outcome.messages.append(message)
            return

        css_files = self.looseStylesheets_find()
        if not css_files:
            outcome.messages.append("No custom CSS files found")
            return

        # Blocks already present come from a run whose deletes failed
        canonical_css = self.canonical_path.read_text(encoding="utf-8")
        custom_css = ""
        for css_file in css_files:
            css_content = css_file.read_text(encoding="utf-8")
            block = f"\n/* Integrated from {css_file.name} */\n{css_content}\n"
            if block in canonical_css:
                outcome.messages.append(f"{css_file.name} already integrated")
                continue
            custom_css += block
            outcome.messages.append(f"Integrating {css_file.name}")

        if custom_css:
            if CUSTOM_STYLES_BANNER.strip() not in canonical_css:
                custom_css = CUSTOM_STYLES_BANNER + custom_css
            with open(self.canonical_path, "a", encoding="utf-8") as f:
                f.write(custom_css)
            outcome.messages.append(f"Integrated custom CSS into {appsettings.canonical_stylesheet}")

        for css_file in css_files:
            css_file.unlink()
            outcome.messages.append(f"Removed {css_file.name}")
        outcome.changed = True

    def links_strip(self, outcome: StepOutcome) -> None:
        html = self.index_path.read_text(encoding="utf-8")
        stripped = stylesheetLinks_strip(html, appsettings.canonical_stylesheet)

        if stripped == html:
            outcome.messages.append("HTML CSS references already clean")
            return

        self.index_path.write_text(stripped, encoding="utf-8")
        outcome.changed = True
        outcome.messages.append("Updated HTML CSS references (removed external CSS links)")

    def artifacts_remove(self, outcome: StepOutcome, artifacts: Optional[List[str]] = None) -> None:
        for artifact in artifacts or appsettings.ephemeral_artifacts:
            artifact_path = self.deck_path / artifact
            if artifact_path.is_dir() and not artifact_path.is_symlink():
                shutil.rmtree(artifact_path)
                outcome.messages.append(f"Removed directory: {artifact}/")
            elif artifact_path.exists() or artifact_path.is_symlink():
                artifact_path.unlink()
                outcome.messages.append(f"Removed file: {artifact}")
            else:
                continue
            outcome.changed = True

        if not outcome.changed:
            outcome.messages.append("No build artifacts found")
