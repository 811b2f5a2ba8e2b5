"""Spreadsheet ingestion and column inference."""
