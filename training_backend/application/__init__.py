"""Application layer: services and best-effort notification dispatch."""
