"""Build tooling, a cooperative async runtime and outline helpers for the TI-Nspire."""

__version__ = "0.1.0"