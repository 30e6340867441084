"""
connectn.interfaces - User interfaces for connect-N

Front ends that drive the game engine. Nothing is imported here so the
engine can be used without pulling in the terminal interface.
"""

__all__ = []
