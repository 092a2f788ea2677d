"""Data acquisition from the metrics provider."""
