"""Tests for route file naming conventions."""

import pytest

from typed_routes.routes import (
    is_typed_route,
    match_array_group,
    match_dynamic_name,
    match_group_name,
    strip_extension,
    strip_platform,
)


class TestIsTypedRoute:
    """Tests for the route file predicate."""

    @pytest.mark.parametrize(
        "name",
        ["index.tsx", "about.ts", "page.jsx", "route.js", "[id].tsx", "[...rest].tsx", "home.ios.tsx"],
    )
    def test_route_files(self, name):
        """Test that source files are routes."""
        assert is_typed_route(name)

    @pytest.mark.parametrize(
        "name",
        [
            "_layout.tsx",
            "+html.tsx",
            "+not-found.tsx",
            "users+api.ts",
            "styles.css",
            "logo.png",
            "types.d.ts",
            "README.md",
        ],
    )
    def test_non_route_files(self, name):
        """Test that layouts, special files and assets are not routes."""
        assert not is_typed_route(name)

    def test_extension_is_case_sensitive(self):
        """Test that upper-case extensions are not recognised."""
        assert not is_typed_route("index.TSX")

    def test_accepts_relative_path(self):
        """Test that only the basename is considered."""
        assert is_typed_route("./(tabs)/home.tsx")
        assert not is_typed_route("./(tabs)/_layout.tsx")
        assert is_typed_route("./+folder/home.tsx")


class TestSegmentMatchers:
    """Tests for segment helpers."""

    def test_strip_extension(self):
        """Test extension removal."""
        assert strip_extension("(tabs)/home.tsx") == "(tabs)/home"
        assert strip_extension("home.ios.js") == "home.ios"

    def test_strip_platform(self):
        """Test platform suffix removal."""
        assert strip_platform("home.ios") == "home"
        assert strip_platform("home.web") == "home"
        assert strip_platform("home") == "home"

    def test_match_group_name(self):
        """Test group segment parsing."""
        assert match_group_name("(tabs)") == "tabs"
        assert match_group_name("tabs") is None

    def test_match_array_group(self):
        """Test array group parsing."""
        assert match_array_group("(tabs,test)") == ["tabs", "test"]
        assert match_array_group("(tabs)") is None
        assert match_array_group("tabs") is None

    def test_match_dynamic_name(self):
        """Test dynamic segment parsing."""
        assert match_dynamic_name("[id]") == ("id", False)
        assert match_dynamic_name("[...rest]") == ("rest", True)
        assert match_dynamic_name("about") is None
