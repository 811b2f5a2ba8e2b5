"""CPACE eligibility estimator.

Reads project cost spreadsheets, detects the line-item table, classifies each
line item into a CPACE eligibility category and totals the financeable cost.
"""

__version__ = "0.1.0"
