"""State/store layer.

This package is the single source of truth for how snapshot pulls and live
push events are merged into one bounded timeline, and for the read-only
views derived from it.
"""
