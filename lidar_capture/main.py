"""
Main entry point for LiDAR Capture

Converts recorded depth maps into cube-filtered PLY point clouds and
inspects exported files.
"""

import argparse
import sys
from pathlib import Path
import numpy as np

from lidar_capture.data_models import CameraIntrinsics, CameraPose
from lidar_capture.export.ply_writer import PLYWriter, read_ply
from lidar_capture.projection.depth_grid import load_depth_image
from lidar_capture.projection.depth_projector import DepthProjector
from lidar_capture.utils.config_manager import ConfigManager


def load_pose(path: str) -> CameraPose:
    """Load a 4x4 camera-to-world matrix from ``.npy`` or whitespace text."""
    pose_path = Path(path)
    if pose_path.suffix.lower() == '.npy':
        matrix = np.load(pose_path)
    else:
        matrix = np.loadtxt(pose_path)
    return CameraPose(np.asarray(matrix).reshape(4, 4))


def run_convert(args) -> int:
    try:
        config = ConfigManager(args.config)
        print(f"Loaded configuration from: {config.config_path}")
    except Exception as e:
        print(f"Error loading configuration: {e}")
        return 1

    try:
        depth_scale = float(config.get_depth_params().get('scale', 0.001))
        frame = load_depth_image(args.depth, scale=depth_scale)
        intrinsics = CameraIntrinsics(*args.intrinsics)
        pose = load_pose(args.pose) if args.pose else CameraPose.identity()
    except (OSError, ValueError) as e:
        print(f"Error loading inputs: {e}")
        return 1

    projector = DepthProjector(config)
    try:
        points = projector.project(frame, intrinsics, pose, stride=args.stride)
    except ValueError as e:
        print(f"Error projecting depth map: {e}")
        return 1

    print("LiDAR Capture")
    print("=" * 50)
    print(f"Depth map: {args.depth} ({frame.width}x{frame.height})")
    print(f"Stride: {projector.stride if args.stride is None else args.stride}")
    print(f"Points inside cube: {len(points)}")

    if points.is_empty:
        print("No points inside the bounding cube; nothing written")
        return 0

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        PLYWriter().write(points, output_path)
    except OSError as e:
        print(f"Failed to write file: {e}")
        return 1

    print(f"Exported to: {output_path}")
    return 0


def run_inspect(args) -> int:
    try:
        points = read_ply(args.ply)
    except (OSError, ValueError) as e:
        print(f"Error reading {args.ply}: {e}")
        return 1

    print(f"{args.ply}: {len(points)} points")
    if not points.is_empty:
        array = points.as_array()
        print(f"  min: {array.min(axis=0)}")
        print(f"  max: {array.max(axis=0)}")
    return 0


def main(argv=None):
    """Main entry point for the capture tools."""
    parser = argparse.ArgumentParser(
        description="Depth map to bounded PLY point cloud conversion"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    convert = subparsers.add_parser("convert", help="Convert a recorded depth map to PLY")
    convert.add_argument(
        "--depth",
        type=str,
        required=True,
        help="Depth map (.npy, 16-bit PNG or float EXR/TIFF)"
    )
    convert.add_argument(
        "--intrinsics",
        type=float,
        nargs=4,
        required=True,
        metavar=("FX", "FY", "CX", "CY"),
        help="Pinhole intrinsics in pixels"
    )
    convert.add_argument(
        "--pose",
        type=str,
        help="4x4 camera-to-world matrix (.npy or text); identity if omitted"
    )
    convert.add_argument(
        "--stride",
        type=int,
        help="Pixel sampling stride (overrides configuration)"
    )
    convert.add_argument(
        "--output",
        type=str,
        default="scan.ply",
        help="Output PLY file"
    )
    convert.add_argument(
        "--config",
        type=str,
        help="Path to configuration file"
    )
    convert.set_defaults(handler=run_convert)

    inspect = subparsers.add_parser("inspect", help="Summarize a PLY file")
    inspect.add_argument("ply", type=str, help="PLY file to inspect")
    inspect.set_defaults(handler=run_inspect)

    args = parser.parse_args(argv)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
