from __future__ import annotations

import sys
from pathlib import Path

# Document the in-tree package without installing it.
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

project = "DNZernike"
author = "DNZernike contributors"
release = "0.1.0"

extensions = [
    "myst_parser",
    "sphinx.ext.autodoc",
    "sphinx.ext.viewcode",
    "sphinx_copybutton",
]

root_doc = "index"
exclude_patterns = ["_build", "examples"]
source_suffix = {".md": "markdown"}

myst_enable_extensions = ["colon_fence", "dollarmath"]

autodoc_member_order = "bysource"
autodoc_typehints = "description"
autodoc_default_options = {"members": True, "undoc-members": False}

html_theme = "sphinx_rtd_theme"
html_title = "DNZernike"
