"""Hedge Layer command-line interface."""
