"""
Core Utilities Package

Modules:
    - time: Periodic Interval timer driving the sampling window
"""

from core.utils.time import Interval

__all__ = ["Interval"]
