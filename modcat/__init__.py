"""
modcat: a local mod catalog manager with dependency-aware downloads.
"""

__version__ = "0.3.0"
