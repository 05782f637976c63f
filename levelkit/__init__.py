"""Byte buffers, checksums, internal keys and check harnesses for LevelDB-style key/value stores."""

__version__ = "0.1.0"