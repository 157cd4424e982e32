"""Utility helpers for the billing engine."""
