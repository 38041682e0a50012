# locked_preview/service/__init__.py

"""Service layer: settings and the fail-soft public entry points."""
