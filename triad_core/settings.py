from __future__ import annotations

import os

_TRUTHY = ('1', 'true', 'yes', 'on')


def _env_flag(name: str, default: str = '0') -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


def debug_enabled() -> bool:
    """TRIAD_DEBUG=1 prints search diagnostics to stdout."""
    return _env_flag('TRIAD_DEBUG')


def elemental_default() -> bool:
    """Default elemental rule for matches started by the CLI and the web API."""
    return _env_flag('TRIAD_ELEMENTAL')


def server_port() -> int:
    return int(os.getenv('PORT', '5000'))


def flask_debug() -> bool:
    return _env_flag('FLASK_DEBUG', os.getenv('DEBUG', '0'))
