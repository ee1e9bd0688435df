"""Crypto alert backend: technical indicators and trading alerts for crypto pairs."""

__version__ = "0.1.0"
