"""
relink_platform package initializer.
"""

from . import manager
from . import records
from . import storage

__all__ = ["manager", "records", "storage"]
