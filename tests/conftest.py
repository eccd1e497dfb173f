"""
Shared fixtures: a template archive built on the fly and a deck made from it
"""

import zipfile
from pathlib import Path

import pytest

from decksmith.lib.materializer import TemplateMaterializer


TEMPLATE_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
	<meta charset="utf-8">
	<title>Template Deck</title>
	<link rel="stylesheet" href="lib/offline-v2.css">
</head>
<body>
	<div class="reveal">
		<div class="slides">
			<section id="title"><h1>Old Title</h1></section>
			<section id="slide-2"><h2>Old Slide</h2></section>
		</div>
	</div>
	<script src="lib/offline-v2.js"></script>
	<script>
		var SLConfig = {"deck":{"slug":"deck-c2bbd4","title":"Template Deck","slide_count":2}};
	</script>
</body>
</html>
"""

CANONICAL_CSS = ".reveal { font-size: 40px; }\n"


def templateArchive_write(path: Path, html: str = TEMPLATE_HTML, with_lib: bool = True) -> Path:
    """Write a template zip with index.html, lib/ and extra scaffolding"""
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr("index.html", html)
        if with_lib:
            archive.writestr("lib/offline-v2.css", CANONICAL_CSS)
            archive.writestr("lib/offline-v2.js", "// engine\n")
        archive.writestr("deck-c2bbd4/index.html", "<html></html>")
        archive.writestr("README.txt", "template notes")
    return path


@pytest.fixture
def template_zip(tmp_path: Path) -> Path:
    return templateArchive_write(tmp_path / "template.zip")


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    path = tmp_path / "decks"
    path.mkdir()
    return path


@pytest.fixture
def deck_path(template_zip: Path, output_dir: Path) -> Path:
    return TemplateMaterializer(template_archive=template_zip).materialize("test01", output_dir)
