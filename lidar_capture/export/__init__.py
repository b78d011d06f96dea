"""
Export Module

ASCII PLY serialization and the user-triggered export of the current cloud.
"""

from .ply_writer import PLYWriter, serialize, read_ply
from .exporter import PointCloudExporter, ExportResult, ExportStatus

__all__ = ['PLYWriter', 'serialize', 'read_ply', 'PointCloudExporter', 'ExportResult', 'ExportStatus']
