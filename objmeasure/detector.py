"""
Detector boundary
Detection records, per-frame camera context and the detector capability.

The neural network is a black box: anything with detect(image) returning a
list of Detection can feed a MeasurementSession. Two implementations ship
here, a scripted replay detector for tests and an Ultralytics YOLO adapter.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
from PIL import Image


@dataclass(frozen=True)
class Detection:
    """One object reported by the detector for the current frame."""
    class_label: str
    score: float
    bbox: Tuple[float, float, float, float]  # (x, y, width, height) pixels

    @classmethod
    def from_xyxy(
        cls,
        class_label: str,
        score: float,
        x1: float, y1: float, x2: float, y2: float
    ) -> "Detection":
        return cls(class_label=class_label, score=score, bbox=(x1, y1, x2 - x1, y2 - y1))

    @property
    def x(self) -> float:
        return self.bbox[0]

    @property
    def y(self) -> float:
        return self.bbox[1]

    @property
    def width(self) -> float:
        return self.bbox[2]

    @property
    def height(self) -> float:
        return self.bbox[3]

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    @property
    def bbox_xyxy(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def contains_point(self, px: float, py: float) -> bool:
        """True if (px, py) lies inside the box, edges included."""
        return self.x <= px <= self.x + self.width and self.y <= py <= self.y + self.height

    def to_dict(self) -> Dict:
        return {
            "class": self.class_label,
            "score": self.score,
            "bbox": list(self.bbox),
        }


@dataclass(frozen=True)
class CameraFrameContext:
    """Geometry of the frame the detections were produced on."""
    image_width_px: int
    image_height_px: int
    horizontal_fov_degrees: float = 60.0

    @classmethod
    def from_image_shape(
        cls,
        shape: Sequence[int],
        horizontal_fov_degrees: float = 60.0
    ) -> "CameraFrameContext":
        """
        Build the context from a numpy image shape.

        Args:
            shape: (H, W) or (H, W, C)
            horizontal_fov_degrees: Camera horizontal field of view
        """
        h, w = shape[:2]
        return cls(
            image_width_px=int(w),
            image_height_px=int(h),
            horizontal_fov_degrees=horizontal_fov_degrees
        )


def load_image(image: Union[str, np.ndarray, Image.Image]) -> np.ndarray:
    """Return an RGB numpy array for a path, PIL image or array."""
    if isinstance(image, str):
        return np.array(Image.open(image).convert('RGB'))
    if isinstance(image, Image.Image):
        return np.array(image.convert('RGB'))
    return image


class ObjectDetector(ABC):
    """
    Detector capability injected into the measurement session.

    Implementations must return boxes in the pixel space of the image they
    were given; the session derives the frame size from that same image.
    """

    @abstractmethod
    def detect(self, image: np.ndarray) -> List[Detection]:
        raise NotImplementedError


class ReplayDetector(ObjectDetector):
    """
    Deterministic detector that replays scripted detections.

    Each call to detect() returns the next frame's list; once the script is
    exhausted it keeps returning an empty list (nothing in view).
    """

    def __init__(self, frames: Iterable[Sequence[Detection]]):
        self.frames: List[List[Detection]] = [list(f) for f in frames]
        self.calls = 0

    def detect(self, image: np.ndarray) -> List[Detection]:
        index = self.calls
        self.calls += 1
        if index >= len(self.frames):
            return []
        return list(self.frames[index])

    @property
    def exhausted(self) -> bool:
        return self.calls >= len(self.frames)


class UltralyticsDetector(ObjectDetector):
    """
    Adapter over an Ultralytics YOLO model.

    Converts each predicted box from xyxy to the (x, y, width, height)
    layout used throughout the measurement core.
    """

    def __init__(
        self,
        model_name: str = "yolov8n.pt",
        confidence_threshold: float = 0.25,
        iou_threshold: float = 0.45,
        device: str = "cpu",
        model=None
    ):
        """
        Args:
            model_name: Ultralytics weights file to load
            confidence_threshold: Minimum confidence for detections
            iou_threshold: IoU threshold for NMS
            device: Device to run inference on ('cpu', 'cuda:0', etc.)
            model: Already-constructed model (skips loading model_name)
        """
        self.model_name = model_name
        self.confidence_threshold = confidence_threshold
        self.iou_threshold = iou_threshold
        self.device = device

        if model is None:
            from ultralytics import YOLO

            print(f"[Detector] Loading {model_name}...")
            model = YOLO(model_name)
            print(f"[Detector] Model loaded successfully on {device}")
        self.model = model

    def detect(self, image: Union[str, np.ndarray, Image.Image]) -> List[Detection]:
        image = load_image(image)

        results = self.model.predict(
            image,
            conf=self.confidence_threshold,
            iou=self.iou_threshold,
            device=self.device,
            verbose=False
        )

        detections = []
        for result in results:
            for box in result.boxes:
                cls_id = int(box.cls[0])
                conf = float(box.conf[0])
                x1, y1, x2, y2 = (float(v) for v in box.xyxy[0].cpu().numpy())

                detections.append(Detection.from_xyxy(
                    class_label=result.names[cls_id],
                    score=conf,
                    x1=x1, y1=y1, x2=x2, y2=y2
                ))
        return detections

    def get_model_info(self) -> Dict:
        """Get information about the loaded model."""
        return {
            "model_name": self.model_name,
            "device": self.device,
            "confidence_threshold": self.confidence_threshold,
            "iou_threshold": self.iou_threshold
        }


# Utility functions
def filter_detections_by_confidence(
    detections: List[Detection],
    min_confidence: float
) -> List[Detection]:
    """Filter detections by minimum confidence threshold."""
    return [d for d in detections if d.score >= min_confidence]


def filter_detections_by_class(
    detections: List[Detection],
    classes: List[str]
) -> List[Detection]:
    """Filter detections to include only specified classes."""
    wanted = {c.lower() for c in classes}
    return [d for d in detections if d.class_label.lower() in wanted]


def find_detection_at(
    detections: List[Detection],
    px: float,
    py: float,
    min_confidence: float = 0.0
) -> Optional[Detection]:
    """First detection (detector order) whose box contains the point."""
    for det in detections:
        if det.score >= min_confidence and det.contains_point(px, py):
            return det
    return None
