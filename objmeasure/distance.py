"""
Distance Estimator
Pinhole-camera distance from a detection's pixel width and its known real width.

    distance = real_width * focal_length / pixel_width
"""

from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np

from objmeasure.catalog import ObjectCatalog
from objmeasure.detector import CameraFrameContext, Detection
from objmeasure.focal_length import FocalLengthEstimator


# Plausibility window (cm). Below: closer than a hand's reach.
# Above: farther than the width catalog is trusted.
MIN_DISTANCE_CM = 10.0
MAX_DISTANCE_CM = 1000.0


@dataclass(frozen=True)
class DistanceEstimate:
    """Distance to the tracked object; None means it could not be estimated."""
    distance_cm: Optional[float] = None

    @property
    def available(self) -> bool:
        return self.distance_cm is not None

    def to_dict(self) -> Dict:
        return {"distance_cm": self.distance_cm}


class DistanceEstimator:
    """
    Converts a detection's class and pixel width into a distance in cm.

    Every failure mode (unknown class, invalid geometry, implausible result)
    returns None so callers can show a uniform "Calculating..." state.
    """

    def __init__(
        self,
        catalog: Optional[ObjectCatalog] = None,
        focal_length: Optional[FocalLengthEstimator] = None,
        min_distance_cm: float = MIN_DISTANCE_CM,
        max_distance_cm: float = MAX_DISTANCE_CM,
        debug: bool = False
    ):
        """
        Args:
            catalog: Known object widths
            focal_length: Lens model (shared calibration lives here)
            min_distance_cm: Reject estimates closer than this
            max_distance_cm: Reject estimates farther than this
            debug: Print every estimate
        """
        if min_distance_cm >= max_distance_cm:
            raise ValueError(
                f"min_distance_cm ({min_distance_cm}) must be below max_distance_cm ({max_distance_cm})"
            )

        self.catalog = catalog if catalog is not None else ObjectCatalog()
        self.focal_length = focal_length if focal_length is not None else FocalLengthEstimator()
        self.min_distance_cm = min_distance_cm
        self.max_distance_cm = max_distance_cm
        self.debug = debug

    def estimate(
        self,
        class_label: str,
        pixel_width_px: float,
        image_width_px: float,
        fov_degrees: Optional[float] = None
    ) -> Optional[float]:
        """
        Estimate the distance to an object.

        Args:
            class_label: Detector class, looked up in the catalog
            pixel_width_px: Bounding-box width in pixels
            image_width_px: Width of the frame in pixels
            fov_degrees: Horizontal FOV of this frame (uncalibrated case only)

        Returns:
            Distance in cm at full precision, or None
        """
        real_width_cm = self.catalog.lookup(class_label)
        if real_width_cm is None:
            if self.debug:
                print(f"[Distance] No known width for class: {class_label}")
            return None

        if not pixel_width_px or pixel_width_px <= 0 or not image_width_px or image_width_px <= 0:
            if self.debug:
                print(f"[Distance] Invalid dimensions: pixel_width={pixel_width_px}, "
                      f"image_width={image_width_px}")
            return None

        focal_length_px = self.focal_length.effective_focal_length_px(image_width_px, fov_degrees)
        distance_cm = real_width_cm * focal_length_px / pixel_width_px

        if not np.isfinite(distance_cm) or not (
            self.min_distance_cm <= distance_cm <= self.max_distance_cm
        ):
            if self.debug:
                print(f"[Distance] Out of range for {class_label}: {distance_cm:.1f}cm")
            return None

        if self.debug:
            print(f"[Distance] {class_label}: width={real_width_cm}cm, f={focal_length_px:.1f}px, "
                  f"pixels={pixel_width_px:.1f} -> {distance_cm:.1f}cm")
        return float(distance_cm)

    def estimate_detection(
        self,
        detection: Detection,
        context: CameraFrameContext
    ) -> DistanceEstimate:
        """Estimate the distance of a detection within its frame."""
        return DistanceEstimate(self.estimate(
            detection.class_label,
            detection.width,
            context.image_width_px,
            fov_degrees=context.horizontal_fov_degrees
        ))


def relative_distance(
    initial_width_px: float,
    current_width_px: float,
    initial_distance_cm: float
) -> Optional[float]:
    """
    Distance inferred from how much the box grew or shrank since the baseline.

    A box twice as wide as at baseline means the object is at half the
    baseline distance. Independent of the catalog width.
    """
    if not initial_width_px or initial_width_px <= 0:
        return None
    if not current_width_px or current_width_px <= 0:
        return None
    return initial_distance_cm * (initial_width_px / current_width_px)
