"""
Logging configuration for rdconfig.

Importing this module installs ``ConfigLogger`` as the logger class, so every
``rdconfig.*`` logger supports ``trace`` and ``log_with_data``. The package
``__init__`` imports it before any other submodule.

Usage:
    from rdconfig.logging_config import setup_logging, get_logger

    setup_logging(verbose=True, log_file=str(resolver.log_path() / "config.log"))

    logger = get_logger(__name__)
    logger.log_with_data(logging.INFO, "Peers loaded", {'count': 12})
"""

import json
import logging
import sys
import threading
from datetime import datetime
from enum import Enum, auto
from pathlib import Path
from typing import Any, Dict, Optional, Set

TRACE = 5
logging.addLevelName(TRACE, 'TRACE')


class FeatureArea(Enum):
    """Feature areas, derived from the logger name."""
    CORE = auto()
    CODEC = auto()
    CRYPTO = auto()
    PATHS = auto()
    OPTIONS = auto()
    PEERS = auto()
    BOOKS = auto()
    NETWORK = auto()


_FEATURE_MAP = {
    'codec': FeatureArea.CODEC,
    'crypto': FeatureArea.CRYPTO,
    'paths': FeatureArea.PATHS,
    'options': FeatureArea.OPTIONS,
    'peers': FeatureArea.PEERS,
    'books': FeatureArea.BOOKS,
    'network': FeatureArea.NETWORK,
    'rendezvous': FeatureArea.NETWORK,
}

_lock = threading.Lock()
_enabled_features: Set[FeatureArea] = set(FeatureArea)


def feature_for(logger_name: str) -> FeatureArea:
    """Map a dotted logger name to its feature area."""
    for part in logger_name.lower().split('.'):
        for key, feature in _FEATURE_MAP.items():
            if key in part:
                return feature
    return FeatureArea.CORE


# =============================================================================
# FORMATTER AND FILTER
# =============================================================================

class ConfigFormatter(logging.Formatter):
    """Plain or JSON lines tagged with the feature area."""

    COLORS = {
        'TRACE': '\033[90m',
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33;1m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[31;1m',
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True, json_format: bool = False):
        super().__init__()
        self.use_colors = use_colors and sys.stdout.isatty()
        self.json_format = json_format

    def format(self, record: logging.LogRecord) -> str:
        feature = feature_for(record.name).name.lower()
        extra_data = getattr(record, 'extra_data', None)

        if self.json_format:
            data: Dict[str, Any] = {
                'timestamp': datetime.now().isoformat(),
                'level': record.levelname,
                'logger': record.name,
                'feature': feature,
                'message': record.getMessage(),
            }
            if extra_data:
                data['extra'] = extra_data
            if record.exc_info:
                data['exception'] = self.formatException(record.exc_info)
            return json.dumps(data, default=str)

        level = f"{record.levelname:8}"
        if self.use_colors:
            level = f"{self.COLORS.get(record.levelname, '')}{level}{self.RESET}"
        text = f"{datetime.now():%Y-%m-%d %H:%M:%S} {level} [{feature}] {record.getMessage()}"
        if extra_data:
            text = " | ".join([text] + [f"{k}={v}" for k, v in extra_data.items()])
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text


class FeatureFilter(logging.Filter):
    """Pass warnings always, lower levels only for enabled features."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.WARNING or feature_for(record.name) in _enabled_features


# =============================================================================
# LOGGER CLASS
# =============================================================================

class ConfigLogger(logging.Logger):
    """Logger with a TRACE level and structured extra data."""

    def trace(self, msg: str, *args, **kwargs):
        if self.isEnabledFor(TRACE):
            self._log(TRACE, msg, args, **kwargs)

    def log_with_data(self, level: int, msg: str, data: Dict[str, Any], **kwargs):
        if self.isEnabledFor(level):
            extra = dict(kwargs.pop('extra', None) or {})
            extra['extra_data'] = data
            self._log(level, msg, (), extra=extra, **kwargs)


logging.setLoggerClass(ConfigLogger)


# =============================================================================
# SETUP
# =============================================================================

def setup_logging(
    verbose: bool = False,
    trace: bool = False,
    log_file: Optional[str] = None,
    console: bool = True,
    json_format: bool = False,
    features: Optional[Set[FeatureArea]] = None,
) -> None:
    """
    Install console and file handlers on the root logger.

    Args:
        verbose: Log at DEBUG instead of INFO
        trace: Log at TRACE (implies verbose)
        log_file: Optional file path for log output
        console: Log to stdout
        json_format: Emit JSON lines instead of text
        features: Features allowed below WARNING (all by default)
    """
    global _enabled_features

    if trace:
        level = TRACE
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    with _lock:
        _enabled_features = set(features) if features is not None else set(FeatureArea)

        root = logging.getLogger()
        root.setLevel(level)
        for handler in root.handlers[:]:
            root.removeHandler(handler)

        handlers = []
        if console:
            handlers.append((logging.StreamHandler(sys.stdout), True))
        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            handlers.append((logging.FileHandler(log_file), False))

        for handler, colors in handlers:
            handler.setLevel(level)
            handler.setFormatter(ConfigFormatter(use_colors=colors, json_format=json_format))
            handler.addFilter(FeatureFilter())
            root.addHandler(handler)


def get_logger(name: str) -> ConfigLogger:
    """The ``ConfigLogger`` registered under ``name``."""
    logger = logging.getLogger(name)
    if not isinstance(logger, ConfigLogger):
        raise TypeError(f"logger '{name}' was created before rdconfig.logging_config was imported")
    return logger


__all__ = [
    'TRACE',
    'FeatureArea',
    'feature_for',
    'ConfigFormatter',
    'FeatureFilter',
    'ConfigLogger',
    'setup_logging',
    'get_logger',
]
