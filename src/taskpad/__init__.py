# src/taskpad/__init__.py

"""Task records for a to-do list with whole-collection key-value persistence."""

__version__ = "0.1.0"
