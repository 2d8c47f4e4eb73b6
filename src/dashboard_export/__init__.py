"""Top-level package for the dashboard report exporter.

Provides subpackages:
- dashboard_export.export – capture, pagination and PDF assembly pipeline
- dashboard_export.common – shared file helpers
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("dashboard-export")
except PackageNotFoundError:
    # Running from a source checkout without an install
    __version__ = "0.0.0"

__all__: list[str] = ["__version__"]
