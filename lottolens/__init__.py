"""
LottoLens - Digit Pattern Analysis for Daily Draw Results
==========================================================

Finds historical occurrences of a short digit query inside dated draw
results and ranks likely follow-on numbers per digit group.
"""

__version__ = "1.0.0"
