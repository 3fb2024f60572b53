"""Command line interface for dblink."""
