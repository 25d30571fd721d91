"""
Repository layer for data access operations.

This package contains the storage facade, the query client it runs on in
live mode and the in-memory collections it answers from in demo mode.
"""
