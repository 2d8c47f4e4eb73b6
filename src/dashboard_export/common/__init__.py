"""Shared helpers used across the export pipeline."""
