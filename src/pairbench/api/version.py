"""
Version Management
==================
Centralized version handling for the PairBench API.
"""

from importlib.metadata import PackageNotFoundError, version
from typing import Optional

from pairbench import __version__ as _PACKAGE_VERSION

_cached_version: Optional[str] = None


def get_version() -> str:
    """
    Get the current PairBench version.

    Reads installed package metadata first and falls back to the version
    declared in the package itself when running from a source checkout.
    """
    global _cached_version

    if _cached_version is not None:
        return _cached_version

    try:
        _cached_version = version("pairbench")
    except PackageNotFoundError:
        _cached_version = _PACKAGE_VERSION
    return _cached_version


__all__ = ["get_version"]
