"""Utility helpers for JSON:API query parsing."""

from .query_params import build_include_tree, parse_query_params, query_pairs

__all__ = ["build_include_tree", "parse_query_params", "query_pairs"]
