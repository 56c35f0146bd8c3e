"""Tick listener adapters for observing scheduler decisions."""
