"""
Service functions for the employee export pipeline.

This package contains the individual pipeline stages: archive reading,
record decoding, filtering, and CSV writing.
"""

__all__ = ['archive', 'records', 'filters', 'csv_writer']
