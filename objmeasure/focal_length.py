"""
Focal Length Estimator
Effective pinhole focal length in pixels, from field of view or calibration.
"""

from typing import Optional

import numpy as np


def focal_length_from_fov(image_width_px: float, fov_degrees: float = 60.0) -> float:
    """Focal length (pixels) of a pinhole camera with the given horizontal FOV."""
    fov_rad = np.radians(fov_degrees)
    return float((image_width_px / 2) / np.tan(fov_rad / 2))


class FocalLengthEstimator:
    """
    Holds the lens model used by the distance estimator.

    Without calibration the focal length is derived from an assumed
    horizontal field of view (a typical webcam is ~60 degrees). After
    calibrate() the measured focal length is used for every image width
    until it is re-calibrated or cleared.

    The calibration is shared configuration: every session that holds the
    same estimator instance sees the same value. Give each session its own
    instance if they run against different cameras.
    """

    def __init__(
        self,
        assumed_fov_degrees: float = 60.0,
        calibrated_focal_length_px: Optional[float] = None
    ):
        """
        Args:
            assumed_fov_degrees: Horizontal FOV used when not calibrated
            calibrated_focal_length_px: Previously measured focal length, if any
        """
        if not 0 < assumed_fov_degrees < 180:
            raise ValueError(f"FOV must be in (0, 180) degrees, got {assumed_fov_degrees}")
        if calibrated_focal_length_px is not None and calibrated_focal_length_px <= 0:
            raise ValueError(
                f"Calibrated focal length must be positive, got {calibrated_focal_length_px}"
            )

        self.assumed_fov_degrees = assumed_fov_degrees
        self.calibrated_focal_length_px = calibrated_focal_length_px

    @property
    def is_calibrated(self) -> bool:
        return self.calibrated_focal_length_px is not None

    def calibrate(
        self,
        known_width_cm: float,
        known_distance_cm: float,
        observed_pixel_width: float
    ) -> float:
        """
        Calibrate the focal length from one reference observation.

        Usage:
            1. Place an object of known width at a measured distance
            2. Read its bounding-box width in pixels
            3. Call this function; the result is used from now on

        Args:
            known_width_cm: Real width of the reference object
            known_distance_cm: Measured camera-to-object distance
            observed_pixel_width: Bounding-box width of the object in pixels

        Returns:
            Calibrated focal length in pixels
        """
        if known_width_cm <= 0 or known_distance_cm <= 0 or observed_pixel_width <= 0:
            raise ValueError(
                "Calibration inputs must be positive: "
                f"width={known_width_cm}, distance={known_distance_cm}, pixels={observed_pixel_width}"
            )

        focal_length = observed_pixel_width * known_distance_cm / known_width_cm
        self.calibrated_focal_length_px = float(focal_length)

        print(f"[Calibration] width={known_width_cm}cm, distance={known_distance_cm}cm, "
              f"observed={observed_pixel_width}px")
        print(f"[Calibration] Focal length set to: {self.calibrated_focal_length_px:.1f}px")
        return self.calibrated_focal_length_px

    def clear_calibration(self) -> None:
        """Fall back to the FOV-derived focal length."""
        self.calibrated_focal_length_px = None
        print("[Calibration] Cleared, using FOV-derived focal length")

    def effective_focal_length_px(
        self,
        image_width_px: float,
        assumed_fov_degrees: Optional[float] = None
    ) -> float:
        """
        Focal length to use for an image of the given width.

        Args:
            image_width_px: Width of the frame the detection came from
            assumed_fov_degrees: Per-call FOV (defaults to the estimator's)

        Returns:
            Focal length in pixels
        """
        if self.calibrated_focal_length_px is not None:
            return self.calibrated_focal_length_px

        fov = self.assumed_fov_degrees if assumed_fov_degrees is None else assumed_fov_degrees
        return focal_length_from_fov(image_width_px, fov)
