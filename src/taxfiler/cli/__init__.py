"""Command line interface for taxfiler."""
