"""
Point Cloud Exporter

User-triggered export of the current point cloud to a PLY file, handed to an
external share handler.
"""

import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Union
import logging

from ..capture.point_cloud_store import PointCloudStore
from ..utils.config_manager import ConfigManager
from .ply_writer import PLYWriter


class ExportStatus(Enum):
    EXPORTED = "exported"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass
class ExportResult:
    """Outcome of one export request."""
    status: ExportStatus
    path: Optional[Path] = None
    point_count: int = 0
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.status is ExportStatus.EXPORTED


class PointCloudExporter:
    """Writes the stored point cloud to disk and shares the file."""

    def __init__(self,
                 store: PointCloudStore,
                 share_handler: Optional[Callable[[Path], None]] = None,
                 config_manager: Optional[ConfigManager] = None,
                 output_dir: Optional[Union[str, Path]] = None):
        """
        Initialize exporter.

        Args:
            store: Holder of the current point cloud
            share_handler: Called with the written file path
            config_manager: Configuration manager instance
            output_dir: Export directory; overrides configuration
        """
        self.config = config_manager or ConfigManager()
        self.logger = logging.getLogger(__name__)

        export_config = self.config.get_export_params()

        self.store = store
        self.share_handler = share_handler
        self.writer = PLYWriter()
        self.filename = export_config.get('filename', 'scan.ply')
        self.output_dir = Path(output_dir or export_config.get('output_dir')
                               or tempfile.gettempdir())

        self.logger.info(f"Exporter initialized: {self.output_path}")

    @property
    def output_path(self) -> Path:
        return self.output_dir / self.filename

    def export(self) -> ExportResult:
        """
        Export the current point cloud.

        Returns:
            ExportResult; EMPTY without writing when there are no points,
            FAILED when the file cannot be written
        """
        points = self.store.points
        if points.is_empty:
            self.logger.debug("Export skipped: no points captured")
            return ExportResult(status=ExportStatus.EMPTY)

        try:
            path = self.writer.write(points, self.output_path)
        except OSError as e:
            self.logger.error(f"Failed to write point cloud to {self.output_path}: {e}")
            return ExportResult(status=ExportStatus.FAILED, error=e)

        if self.share_handler is not None:
            self.share_handler(path)

        return ExportResult(status=ExportStatus.EXPORTED, path=path, point_count=len(points))
