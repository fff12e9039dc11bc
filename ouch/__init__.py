"""Compression formats from file names and contents, and tar archive building, unpacking and listing."""

__version__ = "0.5.1"