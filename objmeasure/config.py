"""Configuration for the measurement session, loadable from YAML."""

from dataclasses import asdict, dataclass, field
from typing import Dict, Optional

import yaml


@dataclass
class MeasurementConfig:
    # Camera
    horizontal_fov_degrees: float = 60.0
    calibrated_focal_length_px: Optional[float] = None

    # Distance plausibility window (cm)
    min_distance_cm: float = 10.0
    max_distance_cm: float = 1000.0

    # Dimension / confidence tuning constants
    sweet_spot_distance_cm: float = 100.0
    distance_falloff_cm: float = 200.0
    depth_ratio: float = 0.7
    reliable_area_px: float = 100.0 * 100.0

    # Tracker
    match_threshold_px: float = 50.0

    # Session
    max_occlusion_frames: Optional[int] = None  # None = never drop the selection
    min_selection_score: float = 0.6
    debug: bool = False

    # Catalog
    catalog_overrides: Dict[str, float] = field(default_factory=dict)

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        if not 0 < self.horizontal_fov_degrees < 180:
            raise ValueError(f"horizontal_fov_degrees must be in (0, 180), got {self.horizontal_fov_degrees}")
        if self.calibrated_focal_length_px is not None and self.calibrated_focal_length_px <= 0:
            raise ValueError("calibrated_focal_length_px must be positive")
        if not 0 <= self.min_distance_cm < self.max_distance_cm:
            raise ValueError(
                f"Invalid distance range [{self.min_distance_cm}, {self.max_distance_cm}]"
            )
        if self.match_threshold_px < 0:
            raise ValueError("match_threshold_px must be non-negative")
        if self.max_occlusion_frames is not None and self.max_occlusion_frames < 1:
            raise ValueError("max_occlusion_frames must be at least 1 when set")
        if not 0.0 <= self.min_selection_score <= 1.0:
            raise ValueError("min_selection_score must be in [0, 1]")

    @classmethod
    def from_dict(cls, config: Optional[Dict]) -> "MeasurementConfig":
        """
        Build a config from the sectioned layout used in the YAML files.

        Missing sections and keys keep their defaults.
        """
        config = config or {}
        defaults = cls()

        camera = config.get('camera', {}) or {}
        distance = config.get('distance', {}) or {}
        dimensions = config.get('dimensions', {}) or {}
        tracker = config.get('tracker', {}) or {}
        session = config.get('session', {}) or {}
        catalog = config.get('catalog', {}) or {}

        return cls(
            horizontal_fov_degrees=camera.get('horizontal_fov_degrees', defaults.horizontal_fov_degrees),
            calibrated_focal_length_px=camera.get('calibrated_focal_length_px', defaults.calibrated_focal_length_px),
            min_distance_cm=distance.get('min_cm', defaults.min_distance_cm),
            max_distance_cm=distance.get('max_cm', defaults.max_distance_cm),
            sweet_spot_distance_cm=dimensions.get('sweet_spot_distance_cm', defaults.sweet_spot_distance_cm),
            distance_falloff_cm=dimensions.get('distance_falloff_cm', defaults.distance_falloff_cm),
            depth_ratio=dimensions.get('depth_ratio', defaults.depth_ratio),
            reliable_area_px=dimensions.get('reliable_area_px', defaults.reliable_area_px),
            match_threshold_px=tracker.get('match_threshold_px', defaults.match_threshold_px),
            max_occlusion_frames=tracker.get('max_occlusion_frames', defaults.max_occlusion_frames),
            min_selection_score=session.get('min_selection_score', defaults.min_selection_score),
            debug=session.get('debug', defaults.debug),
            catalog_overrides=dict(catalog.get('overrides', {}) or {}),
        )

    @classmethod
    def from_yaml(cls, path: str) -> "MeasurementConfig":
        """Load configuration from YAML file."""
        with open(path, 'r') as f:
            return cls.from_dict(yaml.safe_load(f))

    def to_dict(self) -> Dict:
        return asdict(self)
