"""Forwarding layer between the news site's browsers and its backend API."""
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("newsgate")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
