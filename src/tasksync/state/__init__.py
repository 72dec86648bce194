"""State/store layer.

This package is the single source of truth for the task collection the UI
renders: the store owns the list, the loading/error status and the display
filter, and derives filtered views on demand.
"""
