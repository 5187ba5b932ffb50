"""Live fantasy draft board built on the Sleeper draft API."""

__version__ = "0.1.0"
