"""Command-line interface for DNS Changer."""
