"""
Multi-tenant rental property bookkeeping core.
"""

__version__ = "1.0.0"
