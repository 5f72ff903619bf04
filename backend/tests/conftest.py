"""
Shared pytest fixtures.

The test_integration.py module points DATABASE_URL at a temp file before
importing the app, so nothing here may import erp.core.database.
"""
import os
import sys

# Ensure the erp package is importable when running pytest from project root
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
