"""
objmeasure: Monocular object measurement core

Estimates distance and real-world size of a user-selected object from a
stream of 2D detections, using a pinhole camera model and a catalog of
known object widths.

Stages per frame:
    A. Re-identify the selected object (ObjectTracker)
    B. Distance from known width + focal length (DistanceEstimator)
    C. Width / height / depth + confidence (DimensionCalculator)

Usage:
    from objmeasure import MeasurementSession, Detection, CameraFrameContext

    session = MeasurementSession()
    session.select(Detection("cup", 0.9, (600, 300, 90, 110)))

    # Optional: calibrate with the object at a known distance
    session.calibrate_from_tracked(known_distance_cm=50.0)

    result = session.frame(detections, CameraFrameContext(1280, 720))
    print(result.summary())
"""

from objmeasure.catalog import KNOWN_OBJECT_WIDTHS_CM, ObjectCatalog, lookup
from objmeasure.config import MeasurementConfig
from objmeasure.detector import (
    CameraFrameContext,
    Detection,
    ObjectDetector,
    ReplayDetector,
    UltralyticsDetector,
)
from objmeasure.dimensions import DimensionCalculator, Dimensions
from objmeasure.distance import DistanceEstimate, DistanceEstimator, relative_distance
from objmeasure.evaluation import DistanceEvaluationResult, DistanceEvaluator
from objmeasure.focal_length import FocalLengthEstimator
from objmeasure.session import FrameMeasurement, MeasurementSession, SessionState
from objmeasure.tracker import ObjectTracker, TrackedObject

__version__ = "1.0.0"

__all__ = [
    # Session
    "MeasurementSession",
    "FrameMeasurement",
    "SessionState",
    "MeasurementConfig",

    # Detector boundary
    "Detection",
    "CameraFrameContext",
    "ObjectDetector",
    "ReplayDetector",
    "UltralyticsDetector",

    # Stage A: Tracking
    "ObjectTracker",
    "TrackedObject",

    # Stage B: Distance
    "KNOWN_OBJECT_WIDTHS_CM",
    "ObjectCatalog",
    "lookup",
    "FocalLengthEstimator",
    "DistanceEstimator",
    "DistanceEstimate",
    "relative_distance",

    # Stage C: Dimensions
    "DimensionCalculator",
    "Dimensions",

    # Evaluation
    "DistanceEvaluator",
    "DistanceEvaluationResult",
]
