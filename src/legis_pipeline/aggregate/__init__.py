"""Aggregation, decomposition and term alignment.

This package turns the filtered corpus into gap-free monthly count series per
document type, decomposes each series into seasonally-adjusted and trend
components, and re-indexes administrative terms on an elapsed-days axis.
Outputs are small pandas tables written to CSV and optionally published to
MongoDB.
"""
