"""
Object Tracker
Re-identifies the selected object in each new frame's detections.
"""

from dataclasses import dataclass, replace
from typing import Dict, List, Optional

from objmeasure.detector import Detection


@dataclass(frozen=True)
class TrackedObject:
    """
    The user's selection plus its distance baseline.

    The baseline (initial_width_px, initial_distance_cm) is captured once,
    on the first valid distance after selection, and only ever set or
    cleared as a pair.
    """
    detection: Detection
    initial_width_px: Optional[float] = None
    initial_distance_cm: Optional[float] = None

    @property
    def class_label(self) -> str:
        return self.detection.class_label

    @property
    def bbox(self):
        return self.detection.bbox

    @property
    def score(self) -> float:
        return self.detection.score

    @property
    def has_baseline(self) -> bool:
        return self.initial_distance_cm is not None

    def with_baseline(self, width_px: float, distance_cm: float) -> "TrackedObject":
        if self.has_baseline:
            raise ValueError("Baseline already captured for this selection")
        return replace(self, initial_width_px=width_px, initial_distance_cm=distance_cm)

    def without_baseline(self) -> "TrackedObject":
        return replace(self, initial_width_px=None, initial_distance_cm=None)

    def with_detection(self, detection: Detection) -> "TrackedObject":
        return replace(self, detection=detection)

    def to_dict(self) -> Dict:
        return {
            **self.detection.to_dict(),
            "initial_width_px": self.initial_width_px,
            "initial_distance_cm": self.initial_distance_cm
        }


class ObjectTracker:
    """
    Nearest-corner re-identification.

    A detection matches when it has the same class label and its top-left
    corner moved at most match_threshold_px on each axis. The first match
    in detector order wins; the order is arbitrary but deterministic.

    No match means the object is treated as temporarily occluded and the
    previous state is kept. The tracker never expires a selection.
    """

    def __init__(self, match_threshold_px: float = 50.0):
        if match_threshold_px < 0:
            raise ValueError(f"match_threshold_px must be non-negative, got {match_threshold_px}")
        self.match_threshold_px = match_threshold_px

    def is_match(self, previous: Detection, candidate: Detection) -> bool:
        return (
            candidate.class_label == previous.class_label
            and abs(candidate.x - previous.x) <= self.match_threshold_px
            and abs(candidate.y - previous.y) <= self.match_threshold_px
        )

    def match(
        self,
        previous: TrackedObject,
        detections: List[Detection]
    ) -> Optional[Detection]:
        """First detection that continues the previous track, if any."""
        for det in detections:
            if self.is_match(previous.detection, det):
                return det
        return None

    def track(
        self,
        previous: TrackedObject,
        detections: List[Detection]
    ) -> TrackedObject:
        """
        Refresh the tracked object from the current frame.

        Args:
            previous: Last known state (may be stale)
            detections: Current frame's detections, in detector order

        Returns:
            The matched detection carrying the previous baseline, or
            previous itself when nothing matched
        """
        matched = self.match(previous, detections)
        if matched is None:
            return previous
        return previous.with_detection(matched)
