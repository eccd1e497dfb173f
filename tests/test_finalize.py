"""
Finalization pipeline tests

Stylesheet consolidation, link stripping, artifact removal, idempotence and
per-step failure isolation.
"""

import re
from pathlib import Path

import pytest

from decksmith.lib.finalize import FinalizationPipeline, stylesheetLinks_strip
from decksmith.lib.errors import ConfigurationError


STYLESHEET_LINK = re.compile(r"<link[^>]*\.css[^>]*>", re.IGNORECASE)


def loose_stylesheets_add(deck_path):
    (deck_path / "a.css").write_text("body{color:red}", encoding="utf-8")
    (deck_path / "b.css").write_text("h1{color:blue}", encoding="utf-8")
    index = deck_path / "index.html"
    html = index.read_text(encoding="utf-8")
    html = html.replace(
        "</head>",
        '<link rel="stylesheet" href="a.css">\n<link rel="stylesheet" href="b.css"></head>',
    )
    index.write_text(html, encoding="utf-8")


def snapshot(deck_path):
    return {
        str(p.relative_to(deck_path)): p.read_bytes()
        for p in sorted(deck_path.rglob("*"))
        if p.is_file()
    }


class TestStylesheetConsolidation:
    """Loose stylesheets merged into lib/offline-v2.css"""

    def test_merge_and_delete(self, deck_path):
        loose_stylesheets_add(deck_path)

        report = FinalizationPipeline(deck_path).run()

        assert report.ok
        assert not (deck_path / "a.css").exists()
        assert not (deck_path / "b.css").exists()
        canonical = (deck_path / "lib" / "offline-v2.css").read_text(encoding="utf-8")
        assert canonical.startswith(".reveal { font-size: 40px; }")
        assert "/* === Custom Styles === */" in canonical
        assert "/* Integrated from a.css */\nbody{color:red}" in canonical
        assert "/* Integrated from b.css */\nh1{color:blue}" in canonical

    def test_single_canonical_link_remains(self, deck_path):
        loose_stylesheets_add(deck_path)

        FinalizationPipeline(deck_path).run()

        html = (deck_path / "index.html").read_text(encoding="utf-8")
        links = STYLESHEET_LINK.findall(html)
        assert links == ['<link rel="stylesheet" href="lib/offline-v2.css">']

    def test_subdirectories_not_scanned(self, deck_path):
        (deck_path / "styles").mkdir()
        (deck_path / "styles" / "nested.css").write_text("p{}", encoding="utf-8")

        FinalizationPipeline(deck_path).run()

        assert (deck_path / "styles" / "nested.css").is_file()
        assert "nested.css" not in (deck_path / "lib" / "offline-v2.css").read_text()

    def test_canonical_name_in_root_is_excluded(self, deck_path):
        (deck_path / "offline-v2.css").write_text("p{}", encoding="utf-8")

        FinalizationPipeline(deck_path).run()

        assert (deck_path / "offline-v2.css").is_file()

    def test_missing_canonical_skips_merge(self, deck_path):
        (deck_path / "lib" / "offline-v2.css").unlink()
        loose_stylesheets_add(deck_path)

        report = FinalizationPipeline(deck_path).run()

        outcome = report.outcome_get("stylesheets")
        assert outcome.ok
        assert not outcome.changed
        assert "skipping" in outcome.messages[0]
        assert (deck_path / "a.css").is_file()
        assert (deck_path / "b.css").is_file()
        # later steps still ran
        assert (deck_path / "assets").is_dir()
        assert report.outcome_get("links").changed


class TestAssetsAndArtifacts:
    """assets/ creation and build artifact removal"""

    def test_assets_created(self, deck_path):
        report = FinalizationPipeline(deck_path).run()
        assert (deck_path / "assets").is_dir()
        assert report.outcome_get("assets").changed

    def test_existing_assets_kept(self, deck_path):
        (deck_path / "assets").mkdir()
        (deck_path / "assets" / "logo.png").write_bytes(b"png")

        report = FinalizationPipeline(deck_path).run()

        assert (deck_path / "assets" / "logo.png").is_file()
        assert not report.outcome_get("assets").changed

    def test_artifacts_removed(self, deck_path):
        shots = deck_path / "screenshots"
        (shots / "run1").mkdir(parents=True)
        (shots / "run1" / "slide-1.png").write_bytes(b"png")
        (deck_path / "output.pdf").write_bytes(b"%PDF")

        report = FinalizationPipeline(deck_path).run()

        assert not shots.exists()
        assert not (deck_path / "output.pdf").exists()
        assert report.outcome_get("artifacts").changed


class TestIdempotence:
    """A second run changes nothing"""

    def test_second_run_is_noop(self, deck_path):
        loose_stylesheets_add(deck_path)
        (deck_path / "output.pdf").write_bytes(b"%PDF")

        first = FinalizationPipeline(deck_path).run()
        before = snapshot(deck_path)
        second = FinalizationPipeline(deck_path).run()

        assert first.changed
        assert second.ok
        assert not second.changed
        assert snapshot(deck_path) == before

    def test_clean_markup_not_rewritten(self, deck_path):
        index = deck_path / "index.html"
        FinalizationPipeline(deck_path).run()
        mtime = index.stat().st_mtime_ns

        report = FinalizationPipeline(deck_path).run()

        assert index.stat().st_mtime_ns == mtime
        assert not report.outcome_get("links").changed


class TestFailureIsolation:
    """One failing step does not stop the others"""

    def test_failed_step_recorded(self, deck_path, monkeypatch):
        def merge_fail(self, outcome):
            raise OSError("disk full")

        monkeypatch.setattr(FinalizationPipeline, "stylesheets_merge", merge_fail)
        loose_stylesheets_add(deck_path)
        (deck_path / "output.pdf").write_bytes(b"%PDF")

        report = FinalizationPipeline(deck_path).run()

        assert not report.ok
        assert [o.step for o in report.outcomes] == ["assets", "stylesheets", "links", "artifacts"]
        failed = report.outcome_get("stylesheets")
        assert not failed.ok
        assert "disk full" in failed.messages[-1]
        assert report.outcome_get("links").changed
        assert not (deck_path / "output.pdf").exists()

    def test_rerun_after_failed_delete_adds_nothing_twice(self, deck_path, monkeypatch):
        loose_stylesheets_add(deck_path)
        real_unlink = Path.unlink

        def unlink_fail(self, *args, **kwargs):
            if self.name == "a.css":
                raise PermissionError("locked")
            return real_unlink(self, *args, **kwargs)

        monkeypatch.setattr(Path, "unlink", unlink_fail)
        first = FinalizationPipeline(deck_path).run()
        monkeypatch.undo()

        assert not first.outcome_get("stylesheets").ok
        assert (deck_path / "a.css").is_file()

        second = FinalizationPipeline(deck_path).run()

        canonical = (deck_path / "lib" / "offline-v2.css").read_text(encoding="utf-8")
        assert second.ok
        assert canonical.count("body{color:red}") == 1
        assert canonical.count("h1{color:blue}") == 1
        assert canonical.count("/* === Custom Styles === */") == 1
        assert not (deck_path / "a.css").exists()
        assert not (deck_path / "b.css").exists()


class TestPreconditions:
    """Missing deck or markup entry"""

    def test_missing_deck(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc:
            FinalizationPipeline(tmp_path / "deck-none").run()
        assert "deck-none" in str(exc.value)

    def test_missing_index(self, tmp_path):
        with pytest.raises(ConfigurationError):
            FinalizationPipeline(tmp_path).run()
        assert not (tmp_path / "assets").exists()


class TestLinkStrip:
    """stylesheetLinks_strip"""

    def test_variants(self):
        html = (
            '<link rel="stylesheet" href="lib/offline-v2.css">'
            "<LINK REL='stylesheet' HREF='theme.css'>"
            '<link rel="icon" href="favicon.ico">'
            '<link href="custom.css" rel="stylesheet" />'
        )
        stripped = stylesheetLinks_strip(html, "lib/offline-v2.css")
        assert stripped == (
            '<link rel="stylesheet" href="lib/offline-v2.css">'
            '<link rel="icon" href="favicon.ico">'
        )
