"""Freight dispatch service package."""
