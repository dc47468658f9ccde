"""
Spy Party: session engine for the local "who is the spy" party game.
"""

__version__ = "0.1.0"
