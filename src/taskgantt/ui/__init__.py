"""
Desktop reporting surface for task graphs and their schedules.

Core modules must not import this package implicitly; the widgets need the
optional PySide6 dependency. ``analysis_logic`` stays Qt-free.
"""

__all__ = []
