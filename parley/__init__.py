"""Parley: team chat backend."""
