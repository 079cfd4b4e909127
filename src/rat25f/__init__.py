"""Rat25F lexer and LL(1) syntax checker."""

__version__ = "0.1.0"
