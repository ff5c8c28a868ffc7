"""
Tests for rdconfig/options - layered option resolution

Tests cover:
- OVERWRITE > stored > DEFAULT precedence
- Write gating against OVERWRITE and DEFAULT
- Bulk purification
- Boolean interpretation of option values
- Built-in and hard settings
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rdconfig.options import keys
from rdconfig.options.keys import family_of, is_known_option
from rdconfig.options.resolver import (
    OptionMap,
    SettingsRegistry,
    apply_option,
    get_or,
    is_option_can_save,
    option2bool,
    purify_options,
)


class TestResolution:
    """Pure resolution helpers."""

    @pytest.mark.unit
    def test_get_or_precedence(self):
        overwrite = OptionMap({'b': "c"})
        default = OptionMap({'a': "a", 'b': "a"})
        stored = {'a': "s", 'b': "b"}
        assert get_or(overwrite, stored, default, 'b') == "c"
        assert get_or(overwrite, stored, default, 'a') == "s"
        assert get_or(overwrite, {}, default, 'a') == "a"
        assert get_or(overwrite, {}, default, 'z') is None

    @pytest.mark.unit
    def test_can_save(self):
        overwrite = OptionMap({'b': "c"})
        default = OptionMap({'a': "a"})
        assert not is_option_can_save(overwrite, 'b', default, "x")
        assert not is_option_can_save(overwrite, 'a', default, "a")
        assert is_option_can_save(overwrite, 'a', default, "b")
        assert is_option_can_save(overwrite, 'z', default, "")

    @pytest.mark.unit
    def test_purify(self):
        overwrite = OptionMap({'b': "c", 'd': "c"})
        default = OptionMap({'b': "a", 'c': "a"})
        values = {'b': "c", 'd': "c", 'c': "a"}
        purify_options(overwrite, default, values)
        assert values == {}

        values = {'b': "x", 'c': "b", 'e': "e"}
        purify_options(overwrite, default, values)
        assert values == {'c': "b", 'e': "e"}

    @pytest.mark.unit
    def test_apply_option(self):
        options = {}
        assert apply_option(options, 'a', "1") is True
        assert apply_option(options, 'a', "1") is False
        assert apply_option(options, 'a', "") is True
        assert options == {}
        assert apply_option(options, 'a', "") is False


class TestOption2Bool:
    """Boolean reading of option values."""

    @pytest.mark.unit
    def test_enable_prefix_defaults_true(self):
        assert option2bool("enable-audio", "") is True
        assert option2bool("enable-audio", "Y") is True
        assert option2bool("enable-audio", "N") is False

    @pytest.mark.unit
    def test_allow_prefix_defaults_false(self):
        assert option2bool("allow-websocket", "") is False
        assert option2bool("allow-websocket", "Y") is True
        assert option2bool("allow-websocket", "1") is False

    @pytest.mark.unit
    @pytest.mark.parametrize("key", [
        keys.OPTION_STOP_SERVICE,
        keys.OPTION_DIRECT_SERVER,
        keys.OPTION_FORCE_ALWAYS_RELAY,
    ])
    def test_explicit_opt_in_keys(self, key):
        assert option2bool(key, "") is False
        assert option2bool(key, "Y") is True

    @pytest.mark.unit
    def test_other_keys_default_true(self):
        assert option2bool("whatever", "") is True
        assert option2bool("whatever", "N") is False


class TestRegistry:
    """DEFAULT/OVERWRITE pairs plus BUILTIN and HARD maps."""

    @pytest.mark.unit
    def test_pairs(self):
        registry = SettingsRegistry()
        assert registry.pair(keys.FAMILY_SETTINGS) == (registry.overwrite_settings, registry.default_settings)
        assert registry.pair(keys.FAMILY_LOCAL) == (registry.overwrite_local, registry.default_local)
        assert registry.pair(keys.FAMILY_DISPLAY) == (registry.overwrite_display, registry.default_display)
        with pytest.raises(KeyError):
            registry.pair("nope")

    @pytest.mark.unit
    def test_hard_settings(self):
        registry = SettingsRegistry()
        assert not registry.is_incoming_only()
        assert registry.hard_password() is None
        registry.hard.update({
            keys.OPTION_CONN_TYPE: "incoming",
            keys.OPTION_DISABLE_AB: "Y",
            keys.OPTION_DISABLE_SETTINGS: "N",
            keys.OPTION_PASSWORD: "hardpw",
        })
        assert registry.is_incoming_only()
        assert not registry.is_outgoing_only()
        assert registry.is_disable_ab()
        assert not registry.is_disable_settings()
        assert registry.hard_password() == "hardpw"

    @pytest.mark.unit
    def test_builtin_settings(self):
        registry = SettingsRegistry()
        assert registry.builtin_bool(keys.OPTION_ALLOW_HOSTNAME_AS_ID) is False
        assert registry.no_register_device() is False
        registry.builtin.set(keys.OPTION_ALLOW_HOSTNAME_AS_ID, "Y")
        registry.builtin.set(keys.OPTION_REGISTER_DEVICE, "N")
        registry.builtin.set(keys.OPTION_DISPLAY_NAME, "Acme Desk")
        assert registry.builtin_bool(keys.OPTION_ALLOW_HOSTNAME_AS_ID) is True
        assert registry.no_register_device() is True
        assert registry.get_builtin_option(keys.OPTION_DISPLAY_NAME) == "Acme Desk"
        assert registry.get_builtin_option("missing") == ""

    @pytest.mark.unit
    def test_clear(self):
        registry = SettingsRegistry()
        registry.default_settings.set('a', "b")
        registry.hard.set('c', "d")
        registry.clear()
        assert len(registry.default_settings) == 0
        assert len(registry.hard) == 0


class TestNamespace:
    """The closed key namespace."""

    @pytest.mark.unit
    def test_families(self):
        assert family_of(keys.OPTION_VIEW_STYLE) == keys.FAMILY_DISPLAY
        assert family_of(keys.OPTION_THEME) == keys.FAMILY_LOCAL
        assert family_of(keys.OPTION_ENABLE_AUDIO) == keys.FAMILY_SETTINGS
        assert family_of(keys.OPTION_DISPLAY_NAME) == keys.FAMILY_BUILTIN
        assert family_of("no-such-option") is None

    @pytest.mark.unit
    def test_known(self):
        assert is_known_option(keys.OPTION_TRACKPAD_SPEED)
        assert not is_known_option("no-such-option")

    @pytest.mark.unit
    def test_wire_strings(self):
        assert keys.OPTION_TRACKPAD_SPEED == "trackpad-speed"
        assert keys.OPTION_ALLOW_HTTPS_21114 == "allow-https-2114"
        assert keys.OPTION_PRINTER_INCOMING_JOB_ACTION == "printer-incomming-job-action"


class TestStoreOptions:
    """Layered options through the network store."""

    @pytest.mark.integration
    def test_overwrite_precedence(self, store, settings):
        settings.default_settings.set('b', "a")
        store.network.set_option('b', "b")
        settings.overwrite_settings.set('b', "c")

        assert store.network.get_option('b') == "c"
        store.network.set_option('b', "x")
        assert store.network.get_option('b') == "c"
        assert store.network.get().options == {'b': "b"}

    @pytest.mark.integration
    def test_set_options_purified(self, store, settings):
        settings.default_settings.update({'b': "a", 'c': "a"})
        settings.overwrite_settings.update({'b': "c", 'd': "c"})
        store.network.set_options({'b': "c", 'd': "c", 'c': "a"})
        assert store.network.get().options == {}

    @pytest.mark.integration
    def test_default_equal_value_not_stored(self, store, settings):
        settings.default_settings.set('enable-audio', "N")
        store.network.set_option('enable-audio', "N")
        assert 'enable-audio' not in store.network.get().options
        assert store.network.get_bool_option('enable-audio') is False

    @pytest.mark.integration
    def test_get_options_merge(self, store, settings):
        settings.default_settings.update({'a': "1", 'b': "1"})
        store.network.set_option('b', "2")
        store.network.set_option('c', "2")
        settings.overwrite_settings.set('c', "3")
        assert store.network.get_options() == {'a': "1", 'b': "2", 'c': "3"}

    @pytest.mark.integration
    def test_options_survive_restart(self, store, make_store):
        store.network.set_option(keys.OPTION_ALLOW_WEBSOCKET, "Y")
        assert make_store().network.use_ws() is True

    @pytest.mark.integration
    def test_empty_value_removes(self, store):
        store.network.set_option('whitelist', "1.2.3.4")
        store.network.set_option('whitelist', "")
        assert store.network.get_option('whitelist') == ""
        assert store.network.get().options == {}


class TestStartupDefaults:
    """Defaults seeded for the general options at startup."""

    @pytest.mark.unit
    def test_seeded_values(self):
        registry = SettingsRegistry()
        registry.init_default_settings()
        assert registry.default_settings.get(keys.OPTION_TEMPORARY_PASSWORD_LENGTH) == "6"
        assert registry.default_settings.get(keys.OPTION_VERIFICATION_METHOD) == "password,otp"
        # No secrets are seeded
        assert keys.OPTION_PASSWORD not in registry.default_settings

    @pytest.mark.integration
    def test_read_through_network_store(self, store, settings):
        settings.init_default_settings()
        network = store.network

        assert network.get_option(keys.OPTION_TEMPORARY_PASSWORD_LENGTH) == "6"
        assert network.get_option(keys.OPTION_VERIFICATION_METHOD) == "password,otp"
        assert network.get_bool_option(keys.OPTION_ALLOW_NUMERNIC_ONE_TIME_PASSWORD) is True
        assert network.get_bool_option(keys.OPTION_ALLOW_REMOTE_CONFIG_MODIFICATION) is True
        assert network.get_bool_option(keys.OPTION_ENABLE_CHECK_UPDATE) is False

    @pytest.mark.integration
    def test_stored_value_wins_and_default_is_not_stored(self, store, settings):
        settings.init_default_settings()
        store.network.set_option(keys.OPTION_TEMPORARY_PASSWORD_LENGTH, "6")
        assert store.network.get().options == {}

        store.network.set_option(keys.OPTION_TEMPORARY_PASSWORD_LENGTH, "8")
        assert store.network.get_option(keys.OPTION_TEMPORARY_PASSWORD_LENGTH) == "8"
