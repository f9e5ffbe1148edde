"""
Solar panel monitoring API.

Ingests batched panel readings, keeps a per-day rollup, and serves the
latest snapshot, per-panel history, and daily statistics.
"""

__version__ = "1.0.0"
