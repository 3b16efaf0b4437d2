"""Proxy service for launching and polling remote actor runs."""

__version__ = "0.1.0"
