"""Command line interface for Colloquy."""
