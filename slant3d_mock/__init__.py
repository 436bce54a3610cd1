"""Behavioral mock of the Slant3D 3D-printing order API."""

__version__ = "1.0.0"
