"""Rakugaki Gallery: doodle critique backend."""

__version__ = "0.1.0"
