"""
Chart Controllers
=================
Glue between the pure model and the render boundary.

Note: This package should be pure Python/NumPy and should NOT import PySide6.
Everything it draws goes through the RenderSurface protocol.
"""
