"""Command-line interface for bitschema."""
