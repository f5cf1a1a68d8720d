"""
Measurement Session
Composition root: selection -> tracking -> distance -> dimensions, per frame.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Union

import numpy as np
from PIL import Image

from objmeasure.catalog import ObjectCatalog
from objmeasure.config import MeasurementConfig
from objmeasure.detector import (
    CameraFrameContext,
    Detection,
    ObjectDetector,
    find_detection_at,
    load_image,
)
from objmeasure.dimensions import DimensionCalculator, Dimensions, round_half_up
from objmeasure.distance import DistanceEstimate, DistanceEstimator, relative_distance
from objmeasure.focal_length import FocalLengthEstimator
from objmeasure.tracker import ObjectTracker, TrackedObject


class SessionState(Enum):
    IDLE = "idle"
    TRACKING = "tracking"


@dataclass
class FrameMeasurement:
    """What the session knows about the tracked object after one frame."""
    frame_index: int
    tracked: TrackedObject
    matched: bool
    distance: DistanceEstimate
    dimensions: Optional[Dimensions] = None
    relative_distance_cm: Optional[float] = None
    lost: bool = False  # selection dropped after too many occluded frames

    @property
    def available(self) -> bool:
        return self.dimensions is not None

    def to_dict(self) -> Dict:
        """Convert result to dictionary for serialization."""
        return {
            "frame_index": self.frame_index,
            "tracked": self.tracked.to_dict(),
            "matched": self.matched,
            "lost": self.lost,
            "distance_cm": self.distance.distance_cm,
            "dimensions": self.dimensions.to_dict() if self.dimensions else None,
            "relative_distance_cm": self.relative_distance_cm
        }

    def summary(self) -> str:
        """Get a human-readable one-line summary."""
        prefix = f"[frame {self.frame_index}] {self.tracked.class_label}"
        if self.lost:
            return f"{prefix}: lost"
        if not self.available:
            return f"{prefix}: Calculating..."

        dims = self.dimensions
        line = (
            f"{prefix}: distance={round_half_up(self.distance.distance_cm)}cm, "
            f"W={dims.width_cm}cm H={dims.height_cm}cm D={dims.depth_cm}cm, "
            f"confidence={dims.confidence_pct}%"
        )
        if not self.matched:
            line += " (occluded)"
        return line


class MeasurementSession:
    """
    Measures one user-selected object across a stream of frames.

    States:
        IDLE      no selection; frame() is not valid
        TRACKING  selection active; each frame() refreshes it

    The first frame with a valid distance after a (re)selection captures
    the baseline used for relative-distance diagnostics. reset() clears the
    selection and baseline together.

    Not thread-safe. If frames arrive out of order the last call wins.
    """

    def __init__(
        self,
        config_path: Optional[str] = None,
        config: Optional[MeasurementConfig] = None,
        detector: Optional[ObjectDetector] = None,
        focal_length: Optional[FocalLengthEstimator] = None,
        catalog: Optional[ObjectCatalog] = None
    ):
        """
        Initialize the session.

        Args:
            config_path: Path to YAML config file (overrides config)
            config: Configuration object (defaults if None)
            detector: Detector used by process(); optional for frame()
            focal_length: Shared lens model; pass the same instance to
                several sessions to share one calibration
            catalog: Known object widths (built from config if None)
        """
        if config_path:
            config = MeasurementConfig.from_yaml(config_path)
        self.config = config if config is not None else MeasurementConfig()

        self.detector = detector
        self.focal_length = focal_length if focal_length is not None else FocalLengthEstimator(
            assumed_fov_degrees=self.config.horizontal_fov_degrees,
            calibrated_focal_length_px=self.config.calibrated_focal_length_px
        )
        self.catalog = catalog if catalog is not None else ObjectCatalog(self.config.catalog_overrides)

        self.distance_estimator = DistanceEstimator(
            catalog=self.catalog,
            focal_length=self.focal_length,
            min_distance_cm=self.config.min_distance_cm,
            max_distance_cm=self.config.max_distance_cm,
            debug=self.config.debug
        )
        self.dimension_calculator = DimensionCalculator(
            sweet_spot_distance_cm=self.config.sweet_spot_distance_cm,
            distance_falloff_cm=self.config.distance_falloff_cm,
            depth_ratio=self.config.depth_ratio,
            reliable_area_px=self.config.reliable_area_px
        )
        self.tracker = ObjectTracker(match_threshold_px=self.config.match_threshold_px)

        self.state = SessionState.IDLE
        self.tracked: Optional[TrackedObject] = None
        self.frame_index = 0
        self.missed_frames = 0

    # ------------------ Selection --------------------
    def select(self, detection: Detection) -> TrackedObject:
        """Start (or restart) tracking a detection, with no baseline."""
        self.tracked = TrackedObject(detection=detection)
        self.state = SessionState.TRACKING
        self.frame_index = 0
        self.missed_frames = 0
        print(f"[Session] Selected {detection.class_label} "
              f"(score={detection.score:.2f}, bbox={tuple(round(v, 1) for v in detection.bbox)})")
        return self.tracked

    def select_at(
        self,
        x: float,
        y: float,
        detections: List[Detection]
    ) -> Optional[TrackedObject]:
        """
        Select the detection under a tap/click position.

        Detections scoring below min_selection_score are not selectable.
        Leaves the session untouched if nothing qualifies.
        """
        detection = find_detection_at(detections, x, y, min_confidence=self.config.min_selection_score)
        if detection is None:
            print(f"[Session] No selectable object at ({x:.0f}, {y:.0f})")
            return None
        return self.select(detection)

    def reset(self) -> None:
        """Drop the selection and its baseline."""
        if self.state is SessionState.TRACKING:
            print(f"[Session] Reset (was tracking {self.tracked.class_label})")
        self.tracked = None
        self.state = SessionState.IDLE
        self.frame_index = 0
        self.missed_frames = 0

    # ------------------ Calibration --------------------
    def calibrate(
        self,
        known_width_cm: float,
        known_distance_cm: float,
        observed_pixel_width: float
    ) -> float:
        """Calibrate the focal length from a reference observation."""
        return self.focal_length.calibrate(known_width_cm, known_distance_cm, observed_pixel_width)

    def calibrate_from_tracked(self, known_distance_cm: float) -> float:
        """
        Calibrate using the tracked object at a measured distance.

        Usage:
            # Hold the selected cup 50 cm from the camera
            session.calibrate_from_tracked(50.0)
        """
        if self.tracked is None:
            raise RuntimeError("No object selected. Call select() first.")

        known_width_cm = self.catalog.lookup(self.tracked.class_label)
        if known_width_cm is None:
            raise ValueError(f"No known width for class '{self.tracked.class_label}'")

        return self.focal_length.calibrate(
            known_width_cm, known_distance_cm, self.tracked.detection.width
        )

    # ------------------ Per-frame --------------------
    def frame(
        self,
        detections: List[Detection],
        context: CameraFrameContext
    ) -> FrameMeasurement:
        """
        Process one frame's detections for the tracked object.

        Args:
            detections: Current frame's detections, in detector order
            context: Geometry of the frame the detections belong to

        Returns:
            FrameMeasurement; dimensions are None when no distance could be
            estimated this frame
        """
        if self.state is not SessionState.TRACKING:
            raise RuntimeError("No object selected. Call select() first.")

        self.frame_index += 1
        previous = self.tracked

        # === Tracking ===
        matched_detection = self.tracker.match(previous, detections)
        matched = matched_detection is not None
        if matched:
            tracked = previous.with_detection(matched_detection)
            self.missed_frames = 0
        else:
            tracked = previous
            self.missed_frames += 1

            limit = self.config.max_occlusion_frames
            if limit is not None and self.missed_frames > limit:
                print(f"[Session] Lost {previous.class_label} after {self.missed_frames} occluded frames")
                frame_index = self.frame_index
                self.reset()
                return FrameMeasurement(
                    frame_index=frame_index,
                    tracked=previous,
                    matched=False,
                    distance=DistanceEstimate(),
                    lost=True
                )

        # === Distance ===
        distance = self.distance_estimator.estimate_detection(tracked.detection, context)

        if distance.available and not tracked.has_baseline:
            tracked = tracked.with_baseline(tracked.detection.width, distance.distance_cm)
            if self.config.debug:
                print(f"[Session] Baseline captured: width={tracked.initial_width_px:.1f}px, "
                      f"distance={tracked.initial_distance_cm:.1f}cm")

        # === Dimensions ===
        dimensions = None
        relative = None
        if distance.available:
            dimensions = self.dimension_calculator.compute(
                tracked.detection.width,
                tracked.detection.height,
                distance.distance_cm,
                context.image_width_px,
                context.image_height_px,
                fov_degrees=context.horizontal_fov_degrees
            )
            relative = relative_distance(
                tracked.initial_width_px,
                tracked.detection.width,
                tracked.initial_distance_cm
            )

        self.tracked = tracked

        result = FrameMeasurement(
            frame_index=self.frame_index,
            tracked=tracked,
            matched=matched,
            distance=distance,
            dimensions=dimensions,
            relative_distance_cm=relative
        )
        if self.config.debug:
            print(f"[Session] {result.summary()}")
        return result

    def process(
        self,
        image: Union[str, np.ndarray, Image.Image],
        fov_degrees: Optional[float] = None
    ) -> FrameMeasurement:
        """
        Run the injected detector on a frame and measure the tracked object.

        Args:
            image: Input frame (path, numpy array, or PIL Image)
            fov_degrees: Horizontal FOV of this frame (defaults to config)
        """
        if self.detector is None:
            raise RuntimeError("No detector configured for this session")
        if self.state is not SessionState.TRACKING:
            raise RuntimeError("No object selected. Call select() first.")

        image = load_image(image)
        detections = self.detector.detect(image)

        fov = self.config.horizontal_fov_degrees if fov_degrees is None else fov_degrees
        context = CameraFrameContext.from_image_shape(image.shape, horizontal_fov_degrees=fov)
        return self.frame(detections, context)

    def get_session_info(self) -> Dict:
        """Get information about the session configuration and state."""
        return {
            "state": self.state.value,
            "tracked": self.tracked.to_dict() if self.tracked else None,
            "frame_index": self.frame_index,
            "missed_frames": self.missed_frames,
            "calibrated_focal_length_px": self.focal_length.calibrated_focal_length_px,
            "config": self.config.to_dict()
        }
