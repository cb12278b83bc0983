"""
Contact Network Graph

Relationship graph analysis for contact snapshots.
"""

__version__ = "0.1.0"
