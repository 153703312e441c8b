"""Shared: telemetry (logging, tracing) and utilities."""
