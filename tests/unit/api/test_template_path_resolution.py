"""Unit tests for template path resolution and template helpers.

The template directory is resolved relative to api/routers/_shared.py, so it works both from the
source tree and from an installed package.
"""

from pathlib import Path

import pytest

from harmonydb.api.routers import _shared
from harmonydb.api.routers._shared import _TEMPLATES_DIR, format_length, templates


class TestTemplatePathResolution:
    """Test template path is correctly resolved."""

    def test_templates_directory_exists(self):
        assert _TEMPLATES_DIR.exists(), f"Templates directory not found: {_TEMPLATES_DIR}"

    def test_templates_directory_is_absolute(self):
        assert _TEMPLATES_DIR.is_absolute(), "Templates directory path should be absolute"

    def test_templates_directory_relative_to_module(self):
        # _shared.py -> routers/ -> api/ -> harmonydb/ -> templates/
        expected_templates_dir = Path(_shared.__file__).parent.parent.parent / "templates"
        assert expected_templates_dir == _TEMPLATES_DIR

    def test_template_search_path_is_correct(self):
        search_paths = templates.env.loader.searchpath
        assert str(_TEMPLATES_DIR) in search_paths

    @pytest.mark.parametrize(
        "name",
        ["base.html", "release/index.html", "release/merge.html", "edit/show.html"],
    )
    def test_templates_load(self, name: str):
        """Would raise TemplateNotFound (or a syntax error) if anything is off."""
        template = templates.env.get_template(name)
        assert template.name == name

    def test_helpers_registered(self):
        assert templates.env.filters["format_length"] is format_length
        assert "expand" in templates.env.globals


class TestFormatLength:
    """Test track length rendering."""

    @pytest.mark.parametrize(
        ("length_ms", "expected"),
        [
            (None, "?:??"),
            (0, "0:00"),
            (59_400, "0:59"),
            (59_600, "1:00"),
            (200_001, "3:20"),
            (3_725_000, "62:05"),
        ],
    )
    def test_format_length(self, length_ms, expected):
        assert format_length(length_ms) == expected
