"""
Test suite for schemakit.

This package contains unit tests for all schemakit components:
- Dialect descriptors and catalog lookups
- The SQLAlchemy-backed SQL template and session
- Table and schema operations, including the ordered clean
- Configuration loading and the CLI
"""
