"""Deterministic rule tables: aggregate-row patterns and eligibility keywords."""
