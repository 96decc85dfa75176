"""Command line interface for doppik."""
