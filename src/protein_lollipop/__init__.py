"""Lollipop plots of protein-coding variants with UniProt domain and PTM tracks."""

__version__ = "0.1.0"
