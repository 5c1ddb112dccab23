"""op-manager command line interface (``opmanager``)."""

from opmanager.cli.app import app

__all__ = ["app"]
