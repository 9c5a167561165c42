"""Command line interface for pqueue."""
