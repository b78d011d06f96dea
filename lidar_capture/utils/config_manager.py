"""
Configuration Management System

Handles loading, validation, and management of capture parameters.
"""

import copy
import yaml
from typing import Dict, Any, Optional
from pathlib import Path


class ConfigManager:
    """Manages configuration parameters for depth capture and export."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to configuration file. If None, uses default config.
        """
        self.config_path = config_path or self._get_default_config_path()
        self.config = self._load_config()
        self._validate_config()

    def _get_default_config_path(self) -> str:
        """Get path to default configuration file."""
        current_dir = Path(__file__).parent.parent.parent
        return str(current_dir / "config" / "default_config.yaml")

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        try:
            with open(self.config_path, 'r') as file:
                config = yaml.safe_load(file)
            return config or {}
        except FileNotFoundError:
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing configuration file: {e}")

    def _validate_config(self, config: Optional[Dict[str, Any]] = None) -> None:
        """Validate configuration parameters for consistency and feasibility."""
        config = self.config if config is None else config

        # Sampling stride
        proj = config.get('projection', {})
        stride = proj.get('sample_stride', 8)
        if not isinstance(stride, int) or stride < 1:
            raise ValueError("projection.sample_stride must be a positive integer")

        # Bounding cube geometry
        cube = config.get('bounding_cube', {})
        edge = float(cube.get('edge_length', 0.3))
        if edge <= 0:
            raise ValueError("bounding_cube.edge_length must be positive")
        offset = cube.get('local_offset', [0.0, 0.0, -0.4])
        if not isinstance(offset, (list, tuple)) or len(offset) != 3:
            raise ValueError("bounding_cube.local_offset must have three components")
        if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in offset):
            raise ValueError("bounding_cube.local_offset components must be numbers")

        # Throttle
        capture = config.get('capture', {})
        interval = float(capture.get('throttle_interval', 1.0))
        if interval < 0:
            raise ValueError("capture.throttle_interval must be non-negative")
        if int(capture.get('max_workers', 1)) < 1:
            raise ValueError("capture.max_workers must be at least 1")

        # Depth image scale
        depth = config.get('depth', {})
        if float(depth.get('scale', 0.001)) <= 0:
            raise ValueError("depth.scale must be positive")

        # Export target
        export = config.get('export', {})
        if not export.get('filename', 'scan.ply'):
            raise ValueError("export.filename must not be empty")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key: Configuration key (e.g., 'bounding_cube.edge_length')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value using dot notation.

        Args:
            key: Configuration key (e.g., 'projection.sample_stride')
            value: Value to set
        """
        keys = key.split('.')
        candidate = copy.deepcopy(self.config)
        config_ref = candidate

        for k in keys[:-1]:
            if k not in config_ref:
                config_ref[k] = {}
            config_ref = config_ref[k]

        config_ref[keys[-1]] = value
        self._validate_config(candidate)
        self.config = candidate

    def save(self, output_path: Optional[str] = None) -> None:
        """
        Save current configuration to file.

        Args:
            output_path: Path to save configuration. If None, overwrites current file.
        """
        save_path = output_path or self.config_path

        with open(save_path, 'w') as file:
            yaml.dump(self.config, file, default_flow_style=False, indent=2)

    def get_projection_params(self) -> Dict[str, Any]:
        """Get depth sampling parameters as a dictionary."""
        return self.config.get('projection', {})

    def get_cube_params(self) -> Dict[str, Any]:
        """Get bounding cube parameters as a dictionary."""
        return self.config.get('bounding_cube', {})

    def get_capture_params(self) -> Dict[str, Any]:
        """Get frame handling parameters as a dictionary."""
        return self.config.get('capture', {})

    def get_depth_params(self) -> Dict[str, Any]:
        """Get recorded depth map parameters as a dictionary."""
        return self.config.get('depth', {})

    def get_export_params(self) -> Dict[str, Any]:
        """Get export parameters as a dictionary."""
        return self.config.get('export', {})
