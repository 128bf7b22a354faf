"""pawtrack: activity timeline and pattern analysis for pet-care logs."""

__version__ = "0.1.0"
