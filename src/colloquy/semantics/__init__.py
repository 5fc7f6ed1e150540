"""Semantic analysis of lambda forms against the action catalog."""

from colloquy.semantics.analyzer import SemanticAnalyzer, analyze, categorize
from colloquy.semantics.catalog import ActionCatalog

__all__ = ["ActionCatalog", "SemanticAnalyzer", "analyze", "categorize"]
