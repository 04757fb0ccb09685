"""Operational CLI scripts."""
