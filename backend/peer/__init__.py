"""Peer sensor backend: reading ingestion and aggregate queries."""
