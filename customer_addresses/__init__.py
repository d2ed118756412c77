"""
Customer delivery addresses

Saved addresses with a single default per customer, over a remote relational
store.
"""

__version__ = "1.0.0"
