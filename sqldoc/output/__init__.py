"""
Output Module

Renders project models into a static documentation site.
"""

from .renderer import Renderer, page_filenames, safe_filename

__all__ = ["Renderer", "page_filenames", "safe_filename"]
