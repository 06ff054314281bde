"""
Persistence package for snapshot encoding.

Snapshots carry data only (schedule and state). Reading and writing the
snapshot text to storage is left to the host.
"""

from .serializer import Serializer

__all__ = ["Serializer"]
