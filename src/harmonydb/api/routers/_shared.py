"""Shared utilities for HTML routers.

Hey future me - every router that renders HTML imports `templates` from here so filters and
globals are registered exactly once.
"""

from pathlib import Path

from fastapi.templating import Jinja2Templates

from harmonydb.i18n import expand

# Path(__file__) is api/routers/_shared.py, three parents up is the harmonydb package. This works
# from the source tree and from site-packages alike, don't swap it for a cwd-relative string.
_TEMPLATES_DIR = Path(__file__).parent.parent.parent / "templates"
templates = Jinja2Templates(directory=str(_TEMPLATES_DIR))


def format_length(length_ms: int | None) -> str:
    """Render a track length in milliseconds as m:ss ("?:??" when unknown)."""
    if length_ms is None:
        return "?:??"
    seconds = round(length_ms / 1000)
    return f"{seconds // 60}:{seconds % 60:02d}"


templates.env.filters["format_length"] = format_length
templates.env.globals["expand"] = expand
