"""
Interactive JPEG optimiser + responsive background derivatives + CSS media queries.
"""

__version__ = "0.1.0"
