"""
Depth Grid Accessor

Bounds-checked access to depth frames and loading of recorded depth maps.
"""

import cv2
import numpy as np
from pathlib import Path
from typing import Tuple, Union
import logging

from ..data_models import DepthFrame

logger = logging.getLogger(__name__)


class DepthGrid:
    """Read-only 2-D accessor over a depth frame with row and element strides."""

    def __init__(self, frame: DepthFrame):
        """
        Initialize depth grid.

        Args:
            frame: Depth frame to read from
        """
        self.frame = frame
        self._data = frame.data.view()
        self._data.flags.writeable = False

    @property
    def width(self) -> int:
        return self.frame.width

    @property
    def height(self) -> int:
        return self.frame.height

    @property
    def row_stride(self) -> int:
        """Bytes between the starts of consecutive rows."""
        return self._data.strides[0]

    @property
    def element_stride(self) -> int:
        """Bytes between consecutive pixels of a row."""
        return self._data.strides[1]

    def value(self, x: int, y: int) -> float:
        """
        Read the depth at column ``x``, row ``y``.

        Raises:
            IndexError: If (x, y) is outside the frame
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} frame")
        return float(self._data[y, x])

    def sample(self, stride: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Pixels at multiples of ``stride`` in both axes, in row-major order.

        Args:
            stride: Sub-sampling factor (>= 1)

        Returns:
            Tuple of (xs, ys, depths) as flat arrays
        """
        if stride < 1:
            raise ValueError(f"Sampling stride must be positive, got {stride}")

        sampled = self._data[::stride, ::stride]
        ys, xs = np.meshgrid(np.arange(0, self.height, stride),
                             np.arange(0, self.width, stride),
                             indexing='ij')
        return xs.ravel(), ys.ravel(), sampled.ravel()


def load_depth_image(path: Union[str, Path], scale: float = 0.001) -> DepthFrame:
    """
    Load a recorded depth map as a depth frame in metres.

    Integer images (16-bit PNG) are multiplied by ``scale``; floating-point
    images (EXR, TIFF) and ``.npy`` arrays are taken to be in metres already.

    Args:
        path: Depth map file
        scale: Metres per stored unit for integer images

    Returns:
        DepthFrame with float32 depths
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Depth map not found: {path}")

    if path.suffix.lower() == '.npy':
        depth = np.load(path)
    else:
        depth = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
        if depth is None:
            raise ValueError(f"Could not read depth map: {path}")

    if depth.ndim == 3:
        depth = depth[:, :, 0]

    if np.issubdtype(depth.dtype, np.integer):
        depth = depth.astype(np.float32) * np.float32(scale)
    else:
        depth = depth.astype(np.float32)

    logger.debug(f"Loaded depth map {path.name}: {depth.shape[1]}x{depth.shape[0]}")
    return DepthFrame.from_array(depth)
