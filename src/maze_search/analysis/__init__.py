"""Comparative analysis of search results."""

from .metrics import (
    AlgorithmComparison, ComparisonSummary, analyze_results, efficiency_ratio, format_summary
)

__all__ = [
    'AlgorithmComparison',
    'ComparisonSummary',
    'analyze_results',
    'efficiency_ratio',
    'format_summary'
]
