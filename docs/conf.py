"""Sphinx configuration for elastic-lite documentation."""

from __future__ import annotations

import shutil
import sys
from pathlib import Path

_DOCS_DIR = Path(__file__).resolve().parent
_REPO_ROOT = _DOCS_DIR.parent
_SRC_DIR = _REPO_ROOT / "src"
_GENERATED_DIR = _DOCS_DIR / "_generated"

sys.path.insert(0, str(_SRC_DIR))

project = "elastic-lite"
author = "elastic-lite contributors"
release = "0.1.0"

extensions = [
    "myst_parser",
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
]

autodoc_typehints = "description"
napoleon_google_docstring = True
napoleon_numpy_docstring = False

source_suffix = {
    ".rst": "restructuredtext",
    ".md": "markdown",
}

exclude_patterns = ["_build"]
html_theme = "alabaster"


def _copy_readme() -> None:
    """Copy the repository README into the Sphinx source tree."""
    _GENERATED_DIR.mkdir(parents=True, exist_ok=True)
    shutil.copy2(_REPO_ROOT / "README.md", _GENERATED_DIR / "README.md")


_copy_readme()
