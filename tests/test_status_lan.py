"""
Tests for rdconfig/store/status.py and rdconfig/store/lan_peers.py
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rdconfig.codec import from_toml
from rdconfig.models.lan_peers import DiscoveryPeer


class TestStatus:
    """Plain key/value status record."""

    @pytest.mark.integration
    def test_set_and_get(self, store, make_store):
        assert store.status.get_option("last-update") == ""
        store.status.set_option("last-update", "2024-01-01")
        assert store.status.get_option("last-update") == "2024-01-01"
        assert make_store().status.get_option("last-update") == "2024-01-01"

    @pytest.mark.integration
    def test_stored_in_plain_text(self, store):
        store.status.set_option("k", "v")
        assert store.status.path().name == "RustDesk_status.toml"
        assert from_toml(store.status.path().read_text()) == {'values': {'k': "v"}}

    @pytest.mark.integration
    def test_unchanged_value_not_written(self, store):
        store.status.set_option("k", "")
        assert not store.status.path().exists()

    @pytest.mark.integration
    def test_bad_values_table(self, store):
        store.status.path().parent.mkdir(parents=True, exist_ok=True)
        store.status.path().write_text('[values]\nk = 1\n')
        assert store.status.get().values == {}


class TestLanPeers:
    """Discovered LAN peers."""

    @pytest.mark.integration
    def test_missing_file(self, store):
        assert store.lan_peers.load().peers == []
        assert store.lan_peers.modify_time() is None

    @pytest.mark.integration
    def test_store_and_load(self, store):
        peers = [
            DiscoveryPeer(id="1", username="a", hostname="h1", platform="Linux", online=True,
                          ip_mac={'192.168.1.2': "00:11:22:33:44:55"}),
            DiscoveryPeer(id="2", username="b"),
        ]
        store.lan_peers.store(peers)
        loaded = store.lan_peers.load().peers
        assert loaded[0] == peers[0]
        assert loaded[1].id == "2"
        assert loaded[1].ip_mac == {}
        assert isinstance(store.lan_peers.modify_time(), int)

    @pytest.mark.integration
    def test_damaged_file(self, store):
        store.lan_peers.path().parent.mkdir(parents=True, exist_ok=True)
        store.lan_peers.path().write_text("[[[")
        assert store.lan_peers.load().peers == []

    @pytest.mark.unit
    def test_same_peer(self):
        a = DiscoveryPeer(id="1", username="u", hostname="x")
        b = DiscoveryPeer(id="1", username="u", hostname="y")
        c = DiscoveryPeer(id="1", username="v")
        assert a.is_same_peer(b)
        assert not a.is_same_peer(c)
