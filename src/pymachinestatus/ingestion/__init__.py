"""Ingestion layer.

This package contains adapters that fetch/receive telemetry (HTTP
snapshots, Socket.IO live events) and emit normalized records.
"""

__all__: list[str] = []
