"""
Bibliography package for bib_core.

This package provides the lookup pipeline shared by every action:
- Parsing BibTeX files into an entry store
- Building the fixed-width display index
- Selecting one entry through an interactive chooser
"""

__all__ = ['parser', 'index', 'selector']
