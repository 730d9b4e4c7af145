"""Diagnostics package.

- always available, light-weight text tools
- cache_bench plotting is optional (requires the diagnostics extras)
"""

__all__ = ["pretty_month", "round_trip", "cache_bench"]
