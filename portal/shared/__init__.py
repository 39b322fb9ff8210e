"""Shared utilities: request context, telemetry, generators, datetime helpers."""
