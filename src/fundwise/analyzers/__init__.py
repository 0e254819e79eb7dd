"""
fundwise analyzers — pure computation modules.

Rule-based engines with no I/O, producing structured results for the review
screens and exporters.
"""

from fundwise.analyzers.indicators import FinancialCalculator, calculate_indicators, classify

__all__ = ["FinancialCalculator", "calculate_indicators", "classify"]
