"""
Matching tools and utilities for the fuzzy tree filter.

This module contains the subsequence matcher, the query parser, the item
matcher, the tree propagation engine and the filesystem snapshot builder.
"""
