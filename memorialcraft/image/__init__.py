"""
MemorialCraft Image Module

Rasterizes composed designs for approval proofs.
"""

from .rasterizer import DesignRasterizer

__all__ = ['DesignRasterizer']
