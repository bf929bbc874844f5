"""CLINT: a Pratt parser front end for a small expression language."""

__version__ = "0.1.0"
