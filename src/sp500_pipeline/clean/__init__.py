"""Validation and pre-filtering of the observation series.

Provides the strict schema check that guards the analytical stages and the
year-range filter applied before any aggregation.
"""
