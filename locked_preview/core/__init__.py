# locked_preview/core/__init__.py

"""Core domain models and utilities used across the locked preview system.

This package provides value types, exceptions, and the replacement table
loader shared by the image and record engines.
"""
