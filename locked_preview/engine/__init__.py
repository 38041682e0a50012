# locked_preview/engine/__init__.py

"""Engine package providing the image and record redactors.

The image side is a pipeline of pure pixel-buffer stages; the record side
is driven by the declarative role table.
"""
