"""
Dimension Calculator
Projects a 2D bounding box at a known distance to real-world width, height
and depth, and scores how much the estimate can be trusted.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import numpy as np


@dataclass(frozen=True)
class Dimensions:
    """Real-world size estimate, rounded to whole cm / percent."""
    width_cm: int
    height_cm: int
    depth_cm: int
    confidence_pct: int

    def to_dict(self) -> Dict:
        return {
            "width_cm": self.width_cm,
            "height_cm": self.height_cm,
            "depth_cm": self.depth_cm,
            "confidence_pct": self.confidence_pct
        }


def round_half_up(value: float) -> int:
    return int(np.floor(value + 0.5))


class DimensionCalculator:
    """
    Similar-triangles projection of a bbox into centimeters.

    The visible scene at distance d spans 2 * d * tan(fov / 2) cm
    horizontally; the bbox covers the same fraction of it as of the image.
    Depth is not observable from one view and is approximated from the
    other two dimensions.

    The constants below were tuned by hand, not derived:
        sweet_spot_distance_cm: distance with the most reliable estimates
        distance_falloff_cm: confidence reaches 0 this far from the sweet spot
        depth_ratio: depth as a fraction of mean(width, height)
        reliable_area_px: boxes smaller than this lose confidence
    """

    def __init__(
        self,
        sweet_spot_distance_cm: float = 100.0,
        distance_falloff_cm: float = 200.0,
        depth_ratio: float = 0.7,
        reliable_area_px: float = 100.0 * 100.0
    ):
        if distance_falloff_cm <= 0 or reliable_area_px <= 0 or depth_ratio < 0:
            raise ValueError(
                "distance_falloff_cm and reliable_area_px must be positive, depth_ratio non-negative"
            )
        self.sweet_spot_distance_cm = sweet_spot_distance_cm
        self.distance_falloff_cm = distance_falloff_cm
        self.depth_ratio = depth_ratio
        self.reliable_area_px = reliable_area_px

    def compute(
        self,
        bbox_width_px: float,
        bbox_height_px: float,
        distance_cm: float,
        image_width_px: float,
        image_height_px: float,
        fov_degrees: float = 60.0
    ) -> Optional[Dimensions]:
        """
        Estimate real-world dimensions of a detected object.

        Args:
            bbox_width_px, bbox_height_px: Bounding-box size in pixels
            distance_cm: Estimated camera-to-object distance
            image_width_px, image_height_px: Frame size in pixels
            fov_degrees: Horizontal field of view

        Returns:
            Dimensions, or None for degenerate geometry
        """
        if min(bbox_width_px, bbox_height_px, image_width_px, image_height_px) <= 0:
            return None
        if distance_cm is None or distance_cm <= 0:
            return None

        width_cm, height_cm, depth_cm = self.project(
            bbox_width_px, bbox_height_px, distance_cm,
            image_width_px, image_height_px, fov_degrees
        )
        confidence = self.confidence(bbox_width_px, bbox_height_px, distance_cm)

        return Dimensions(
            width_cm=round_half_up(width_cm),
            height_cm=round_half_up(height_cm),
            depth_cm=round_half_up(depth_cm),
            confidence_pct=round_half_up(confidence * 100)
        )

    def project(
        self,
        bbox_width_px: float,
        bbox_height_px: float,
        distance_cm: float,
        image_width_px: float,
        image_height_px: float,
        fov_degrees: float = 60.0
    ) -> Tuple[float, float, float]:
        """Unrounded (width, height, depth) in cm."""
        fov_rad = fov_degrees * np.pi / 180
        view_width_cm = 2 * distance_cm * np.tan(fov_rad / 2)
        view_height_cm = view_width_cm * (image_height_px / image_width_px)

        width_cm = (bbox_width_px / image_width_px) * view_width_cm
        height_cm = (bbox_height_px / image_height_px) * view_height_cm
        depth_cm = (width_cm + height_cm) / 2 * self.depth_ratio

        return float(width_cm), float(height_cm), float(depth_cm)

    def confidence_factors(
        self,
        bbox_width_px: float,
        bbox_height_px: float,
        distance_cm: float
    ) -> Dict[str, float]:
        """The three clamped factors that multiply into the confidence."""
        distance_factor = 1 - abs(distance_cm - self.sweet_spot_distance_cm) / self.distance_falloff_cm
        size_factor = (bbox_width_px * bbox_height_px) / self.reliable_area_px
        aspect_ratio = bbox_width_px / bbox_height_px
        aspect_factor = 1 - abs(aspect_ratio - 1) / 2

        return {
            "distance": float(np.clip(distance_factor, 0.0, 1.0)),
            "size": float(np.clip(size_factor, 0.0, 1.0)),
            "aspect": float(np.clip(aspect_factor, 0.0, 1.0)),
        }

    def confidence(self, bbox_width_px: float, bbox_height_px: float, distance_cm: float) -> float:
        """Confidence in [0, 1]."""
        factors = self.confidence_factors(bbox_width_px, bbox_height_px, distance_cm)
        return factors["distance"] * factors["size"] * factors["aspect"]
