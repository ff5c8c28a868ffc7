"""
Tests for rdconfig/store/local.py and rdconfig/store/display.py

Tests cover:
- Window size bounds and no-op writes
- Favourites, remote id and keyboard layout
- LOCAL option gating, the explicit default language and UI-state options
- Display default resolution for enumerated and numeric keys
- Display write gating and the refresh of the cached record
"""

import os
import sys
import time
from unittest.mock import patch

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rdconfig.codec import from_toml
from rdconfig.options import keys
from rdconfig.store.display import format_number, parse_float, parse_int


class TestLocalStore:
    """Local UI state."""

    @pytest.mark.integration
    def test_small_size_ignored(self, store):
        store.local.set_size(0, 0, 200, 200)
        assert store.local.get_size() == (0, 0, 0, 0)
        assert not store.local.path().exists()

    @pytest.mark.integration
    def test_size_persisted(self, store, make_store):
        store.local.set_size(10, 20, 800, 600)
        assert make_store().local.get_size() == (10, 20, 800, 600)

    @pytest.mark.integration
    def test_unchanged_size_not_written(self, store):
        store.local.set_size(10, 20, 800, 600)
        mtime = store.local.path().stat().st_mtime_ns
        os.utime(store.local.path(), ns=(mtime - 10_000_000_000, mtime - 10_000_000_000))
        store.local.set_size(10, 20, 800, 600)
        assert store.local.path().stat().st_mtime_ns == mtime - 10_000_000_000

    @pytest.mark.integration
    def test_fav_and_remote_id(self, store, make_store):
        store.local.set_fav(["1", "2"])
        store.local.set_remote_id("123")
        restarted = make_store()
        assert restarted.local.get_fav() == ["1", "2"]
        assert restarted.local.get_remote_id() == "123"

    @pytest.mark.integration
    def test_kb_layout_always_written(self, store):
        store.local.set_kb_layout_type("ISO")
        store.local.path().unlink()
        store.local.set_kb_layout_type("ISO")
        assert store.local.path().exists()
        assert store.local.get_kb_layout_type() == "ISO"

    @pytest.mark.integration
    def test_option_gating(self, store, settings):
        settings.default_local.set(keys.OPTION_THEME, "dark")
        settings.overwrite_local.set(keys.OPTION_ENABLE_UDP_PUNCH, "N")

        store.local.set_option(keys.OPTION_THEME, "dark")
        store.local.set_option(keys.OPTION_ENABLE_UDP_PUNCH, "Y")
        assert store.local.get().options == {}
        assert store.local.get_option(keys.OPTION_THEME) == "dark"
        assert store.local.get_bool_option(keys.OPTION_ENABLE_UDP_PUNCH) is False

        store.local.set_option(keys.OPTION_THEME, "light")
        assert store.local.get_option(keys.OPTION_THEME) == "light"

    @pytest.mark.integration
    def test_default_language(self, store):
        store.local.set_option(keys.OPTION_LANGUAGE, "de")
        store.local.set_option(keys.OPTION_LANGUAGE, "default")
        assert store.local.get().options == {keys.OPTION_LANGUAGE: ""}
        assert store.local.get_option(keys.OPTION_LANGUAGE) == ""

    @pytest.mark.integration
    def test_option_from_file(self, store, make_store):
        store.local.set_option(keys.OPTION_THEME, "light")
        other = make_store()
        other.local.set_option(keys.OPTION_THEME, "dark")
        assert store.local.get_option(keys.OPTION_THEME) == "light"
        assert store.local.get_option_from_file(keys.OPTION_THEME) == "dark"

    @pytest.mark.integration
    def test_flutter_options(self, store):
        store.local.set_flutter_option(keys.OPTION_FLUTTER_PEER_SORTING, "Remote ID")
        assert store.local.get_flutter_option(keys.OPTION_FLUTTER_PEER_SORTING) == "Remote ID"
        data = from_toml(store.local.path().read_text())
        assert data['ui_flutter'] == {keys.OPTION_FLUTTER_PEER_SORTING: "Remote ID"}
        store.local.set_flutter_option(keys.OPTION_FLUTTER_PEER_SORTING, "")
        assert store.local.get().ui_flutter == {}


class TestNumbers:
    """Number parsing and formatting for display defaults."""

    @pytest.mark.unit
    def test_format_number(self):
        assert format_number(50.0) == "50"
        assert format_number(50.5) == "50.5"
        assert format_number(100) == "100"

    @pytest.mark.unit
    def test_parse_int(self):
        assert parse_int("250") == 250
        assert parse_int("-3") == -3
        assert parse_int("2.5") is None
        assert parse_int(" 2") is None
        assert parse_int("") is None

    @pytest.mark.unit
    def test_parse_float(self):
        assert parse_float("2.5") == 2.5
        assert parse_float("1e2") == 100.0
        assert parse_float("1_0") is None
        assert parse_float(" 1") is None
        assert parse_float("x") is None


class TestDisplayResolution:
    """Resolution of display defaults."""

    @pytest.mark.integration
    def test_enumerated_defaults(self, store):
        assert store.display.get_option(keys.OPTION_VIEW_STYLE) == "original"
        assert store.display.get_option(keys.OPTION_SCROLL_STYLE) == "scrollauto"
        assert store.display.get_option(keys.OPTION_IMAGE_QUALITY) == "balanced"
        assert store.display.get_option(keys.OPTION_CODEC_PREFERENCE) == "auto"
        assert store.display.get_option(keys.OPTION_ENABLE_FILE_COPY_PASTE) == "Y"

    @pytest.mark.integration
    def test_enumerated_values(self, store):
        store.display.set_option(keys.OPTION_IMAGE_QUALITY, "best")
        store.display.set_option(keys.OPTION_SCROLL_STYLE, "sideways")
        store.display.set_option(keys.OPTION_ENABLE_FILE_COPY_PASTE, "N")
        assert store.display.get_option(keys.OPTION_IMAGE_QUALITY) == "best"
        assert store.display.get_option(keys.OPTION_SCROLL_STYLE) == "scrollauto"
        assert store.display.get_option(keys.OPTION_ENABLE_FILE_COPY_PASTE) == "N"

    @pytest.mark.integration
    def test_mobile_view_style(self, make_store, temp_dir):
        mobile = make_store(platform="ios", config_dir=None, app_dir=str(temp_dir / "app"))
        assert mobile.display.get_option(keys.OPTION_VIEW_STYLE) == "adaptive"

    @pytest.mark.integration
    def test_numeric_values(self, store):
        assert store.display.get_option(keys.OPTION_CUSTOM_IMAGE_QUALITY) == "50"
        assert store.display.get_option(keys.OPTION_CUSTOM_FPS) == "30"
        assert store.display.get_option(keys.OPTION_TRACKPAD_SPEED) == "100"

        store.display.set_option(keys.OPTION_CUSTOM_IMAGE_QUALITY, "75.0")
        store.display.set_option(keys.OPTION_CUSTOM_FPS, "200")
        store.display.set_option(keys.OPTION_TRACKPAD_SPEED, "12.5")
        assert store.display.get_option(keys.OPTION_CUSTOM_IMAGE_QUALITY) == "75"
        assert store.display.get_option(keys.OPTION_CUSTOM_FPS) == "30"
        assert store.display.get_option(keys.OPTION_TRACKPAD_SPEED) == "100"

    @pytest.mark.integration
    def test_overwrite_and_default_layers(self, store, settings):
        settings.default_display.set(keys.OPTION_VIEW_ONLY, "Y")
        assert store.display.get_option(keys.OPTION_VIEW_ONLY) == "Y"
        settings.overwrite_display.set(keys.OPTION_IMAGE_QUALITY, "low")
        store.display.set_option(keys.OPTION_IMAGE_QUALITY, "best")
        assert store.display.get_option(keys.OPTION_IMAGE_QUALITY) == "low"
        assert store.display.get().options == {}


class TestDisplayWrites:
    """Display write gating and refresh."""

    @pytest.mark.integration
    def test_empty_value_removes(self, store):
        store.display.set_option(keys.OPTION_VIEW_STYLE, "adaptive")
        store.display.set_option(keys.OPTION_VIEW_STYLE, "")
        assert store.display.get().options == {}
        assert store.display.get_option(keys.OPTION_VIEW_STYLE) == "original"

    @pytest.mark.integration
    def test_default_equal_value_refused(self, store, settings):
        settings.default_display.set(keys.OPTION_VIEW_STYLE, "adaptive")
        store.display.set_option(keys.OPTION_VIEW_STYLE, "adaptive")
        assert store.display.get().options == {}

    @pytest.mark.integration
    def test_read_picks_up_other_writer(self, store, make_store):
        start = time.monotonic()
        with patch("rdconfig.store.display.time.monotonic", return_value=start):
            assert store.display.read(keys.OPTION_VIEW_STYLE) == "original"
            make_store().display.set_option(keys.OPTION_VIEW_STYLE, "adaptive")
            # Within the refresh interval the cached value is served
            assert store.display.read(keys.OPTION_VIEW_STYLE) == "original"

        with patch("rdconfig.store.display.time.monotonic", return_value=start + 5):
            assert store.display.read(keys.OPTION_VIEW_STYLE) == "adaptive"
