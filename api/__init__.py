"""
FastAPI application for the operator training matrix.

This package contains the REST API for loading a training spreadsheet and
looking up or editing operator training by part.
"""

__version__ = "1.0.0"
