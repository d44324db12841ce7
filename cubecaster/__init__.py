"""Textured raycasting engine for .cub scene files, with XPM textures and BMP screenshots."""

__version__ = "0.1.0"