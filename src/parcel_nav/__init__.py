"""Parcel boundary access navigation service."""

__version__ = "0.1.0"
