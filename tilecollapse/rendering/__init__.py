"""
Rendering of generated grids to images.
"""

from .pil_renderer import render_model_to_image, render_model_to_png

__all__ = ["render_model_to_image", "render_model_to_png"]
