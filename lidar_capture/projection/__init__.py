"""
Depth Projection Module

Implements depth grid access, pinhole unprojection and bounding-cube filtering.
"""

from .depth_grid import DepthGrid, load_depth_image
from .depth_projector import DepthProjector, project, unproject, sample_pixels

__all__ = ['DepthGrid', 'load_depth_image', 'DepthProjector', 'project', 'unproject', 'sample_pixels']
