"""Data source readers.

Reads the monthly S&P 500 series from a flat file into a pandas DataFrame
with normalized column names. No cleaning or validation happens here.
"""
