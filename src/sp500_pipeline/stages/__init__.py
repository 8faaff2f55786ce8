"""Analytical stages.

Each module holds pure transformations over ordered pandas frames or single
records: derived ratios, temporal aggregation, sequential growth, rolling
windows, correlation/regression, forecasting and threshold classification.
Null handling is explicit at every arithmetic site (see `nulls`).
"""
