"""
Tests for rdconfig/logging_config.py, rdconfig/utils and the package entry points

Tests cover:
- Feature detection and log formatting
- Error handling helpers
- Reader/writer lock and the guarded singleton
- The process-wide default store
"""

import json
import logging
import os
import sys
import threading

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import rdconfig
from rdconfig import logging_config
from rdconfig.logging_config import (
    TRACE,
    ConfigFormatter,
    ConfigLogger,
    FeatureArea,
    FeatureFilter,
    feature_for,
    get_logger,
)
from rdconfig.options.resolver import SettingsRegistry
from rdconfig.utils.error_handling import (
    CodecError,
    ErrorCategory,
    ErrorSeverity,
    determine_severity,
    handle_error,
    safe_execute,
    with_error_handling,
)
from rdconfig.utils.rwlock import Guarded, ReadWriteLock


def make_record(name: str, msg: str, level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, msg, (), None)


class TestLogging:
    """Feature-aware logging."""

    @pytest.mark.unit
    def test_feature_for(self):
        assert feature_for("rdconfig.store.peers") == FeatureArea.PEERS
        assert feature_for("rdconfig.crypto.password_security") == FeatureArea.CRYPTO
        assert feature_for("rdconfig.store.rendezvous") == FeatureArea.NETWORK
        assert feature_for("rdconfig.config_store") == FeatureArea.CORE

    @pytest.mark.unit
    def test_text_format(self):
        formatter = ConfigFormatter(use_colors=False)
        text = formatter.format(make_record("rdconfig.store.books", "Discarding blob"))
        assert "INFO" in text
        assert "[books]" in text
        assert text.endswith("Discarding blob")

    @pytest.mark.unit
    def test_json_format(self):
        formatter = ConfigFormatter(use_colors=False, json_format=True)
        record = make_record("rdconfig.codec", "bad field", logging.WARNING)
        record.extra_data = {'key': "size"}
        data = json.loads(formatter.format(record))
        assert data['level'] == "WARNING"
        assert data['feature'] == "codec"
        assert data['extra'] == {'key': "size"}

    @pytest.mark.unit
    def test_get_logger(self):
        logger = get_logger("rdconfig.tests.support_logger")
        assert isinstance(logger, ConfigLogger)
        assert get_logger("rdconfig.tests.support_logger") is logger

    @pytest.mark.unit
    def test_package_loggers_are_config_loggers(self):
        for name in ("rdconfig.codec", "rdconfig.store.peers", "rdconfig.store.network"):
            assert isinstance(logging.getLogger(name), ConfigLogger)

    @pytest.mark.unit
    def test_trace_level(self, caplog):
        logger = get_logger("rdconfig.tests.trace_logger")
        with caplog.at_level(TRACE, logger="rdconfig.tests.trace_logger"):
            logger.trace("fine detail")
        assert [r.levelname for r in caplog.records] == ["TRACE"]

    @pytest.mark.unit
    def test_feature_filter(self, monkeypatch):
        monkeypatch.setattr(logging_config, "_enabled_features", {FeatureArea.PEERS})
        feature_filter = FeatureFilter()
        assert feature_filter.filter(make_record("rdconfig.store.peers", "x", logging.DEBUG))
        assert not feature_filter.filter(make_record("rdconfig.codec", "x", logging.DEBUG))
        assert feature_filter.filter(make_record("rdconfig.codec", "x", logging.WARNING))

    @pytest.mark.integration
    def test_preload_logs_structured_data(self, store, caplog):
        with caplog.at_level(logging.INFO, logger="rdconfig.store.peers"):
            store.peers._preload()
        record = caplog.records[-1]
        assert record.getMessage() == "Preload peers done"
        assert record.extra_data["total"] == 0


class TestErrorHandling:
    """Contextual error helpers."""

    @pytest.mark.unit
    def test_severity(self):
        assert determine_severity(FileNotFoundError(), ErrorCategory.FILESYSTEM) == ErrorSeverity.INFO
        assert determine_severity(PermissionError(), ErrorCategory.CODEC) == ErrorSeverity.ERROR
        assert determine_severity(CodecError("x"), ErrorCategory.CODEC) == ErrorSeverity.WARNING
        assert determine_severity(OSError(), ErrorCategory.FILESYSTEM) == ErrorSeverity.ERROR

    @pytest.mark.unit
    def test_handle_error_context(self):
        context = handle_error(OSError("disk"), "store x", ErrorCategory.FILESYSTEM,
                               additional_context={'path': "/tmp/x"})
        data = context.to_dict()
        assert data['error_type'] == "OSError"
        assert data['category'] == "filesystem"
        assert "path: /tmp/x" in context.format_log_message()

    @pytest.mark.unit
    def test_handle_error_reraise(self):
        with pytest.raises(ValueError):
            handle_error(ValueError("x"), "op", reraise=True)

    @pytest.mark.unit
    def test_safe_execute(self):
        with safe_execute("ok") as result:
            result.value = 1
        assert result.success and result.value == 1

        with safe_execute("fails", default_return=-1) as result:
            raise OSError("boom")
        assert not result.success
        assert result.value == -1
        assert result.error.category == ErrorCategory.UNKNOWN

    @pytest.mark.unit
    def test_with_error_handling(self):
        @with_error_handling(category=ErrorCategory.PLATFORM, default_return=list)
        def lookup_home():
            raise RuntimeError("no platform")

        assert lookup_home() == []
        assert lookup_home.__name__ == "lookup_home"


class TestGuarded:
    """Singleton slot."""

    @pytest.mark.unit
    def test_lazy_load_once(self):
        calls = []

        def loader():
            calls.append(1)
            return {'a': 1}

        slot = Guarded(loader)
        assert not slot.loaded
        assert slot.read(lambda v: v['a']) == 1
        assert slot.read(lambda v: v['a']) == 1
        assert calls == [1]

    @pytest.mark.unit
    def test_snapshot_is_a_copy(self):
        slot = Guarded(lambda: {'a': [1]})
        snap = slot.snapshot()
        snap['a'].append(2)
        assert slot.read(lambda v: v['a']) == [1]

    @pytest.mark.unit
    def test_update_and_replace(self):
        slot = Guarded(lambda: {'a': 1})

        def bump(v):
            v['a'] += 1
            return True

        changed, copy_ = slot.update(bump)
        assert changed and copy_ == {'a': 2}
        assert slot.update(lambda v: False) == (False, None)
        assert slot.replace({'a': 2}) is False
        assert slot.replace({'a': 3}) is True
        slot.reload()
        assert slot.snapshot() == {'a': 1}

    @pytest.mark.unit
    def test_concurrent_updates(self):
        slot = Guarded(lambda: {'n': 0})

        def bump(v):
            v['n'] += 1
            return True

        threads = [threading.Thread(target=lambda: [slot.update(bump) for _ in range(100)]) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert slot.read(lambda v: v['n']) == 800

    @pytest.mark.unit
    def test_writer_excludes_readers(self):
        lock = ReadWriteLock()
        lock.acquire_write()
        entered = threading.Event()

        def reader():
            with lock.read():
                entered.set()

        t = threading.Thread(target=reader)
        t.start()
        assert not entered.wait(0.1)
        lock.release_write()
        t.join(timeout=5)
        assert entered.is_set()


class TestDefaultStore:
    """Process-wide store."""

    @pytest.mark.unit
    def test_set_and_reset(self, store):
        try:
            rdconfig.set_store(store)
            assert rdconfig.get_store() is store
        finally:
            rdconfig.set_store(None)

    @pytest.mark.unit
    def test_default_store_seeds_startup_defaults(self, make_store, monkeypatch):
        monkeypatch.setattr(rdconfig, "ConfigStore", lambda: make_store(settings=SettingsRegistry()))
        try:
            rdconfig.set_store(None)
            network = rdconfig.get_store().network
            assert network.get_option("verification-method") == "password,otp"
        finally:
            rdconfig.set_store(None)

    @pytest.mark.integration
    def test_entity_stores_share_record_api(self, store):
        entity_stores = (store.identity, store.network, store.local, store.display, store.status)
        for entity in entity_stores:
            record = entity.get()
            assert isinstance(record, entity.record_cls)
            assert entity.set(record) is False

        record = store.status.get()
        record.values["k"] = "v"
        assert store.status.set(record) is True
        assert store.status.get_option("k") == "v"

    @pytest.mark.unit
    def test_store_attributes(self, store, config_dir):
        assert store.app_name == "RustDesk"
        assert store.config_dir == config_dir
        assert rdconfig.__version__
