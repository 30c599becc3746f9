"""Command groups registered on the root ``twenty`` app."""
