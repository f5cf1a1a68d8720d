"""
Object Catalog
Known real-world widths for the COCO object categories.

Each class carries a single typical width in centimeters. This is coarse on
purpose (a "chair" can be 40 or 70 cm wide) and is the main source of error
in the distance estimate.
"""

from typing import Dict, List, Optional


# Typical real-world widths of common objects (centimeters)
KNOWN_OBJECT_WIDTHS_CM: Dict[str, float] = {
    # People and vehicles
    "person": 45.0,
    "bicycle": 60.0,
    "car": 180.0,
    "motorcycle": 80.0,
    "airplane": 3000.0,
    "bus": 250.0,
    "train": 300.0,
    "truck": 250.0,
    "boat": 200.0,
    # Street objects
    "traffic light": 30.0,
    "fire hydrant": 35.0,
    "stop sign": 60.0,
    "parking meter": 30.0,
    "bench": 120.0,
    # Animals
    "bird": 15.0,
    "cat": 30.0,
    "dog": 40.0,
    "horse": 160.0,
    "sheep": 80.0,
    "cow": 180.0,
    "elephant": 300.0,
    "bear": 150.0,
    "zebra": 150.0,
    "giraffe": 200.0,
    # Accessories
    "backpack": 35.0,
    "umbrella": 80.0,
    "handbag": 25.0,
    "tie": 8.0,
    "suitcase": 50.0,
    # Sports
    "frisbee": 20.0,
    "skis": 150.0,
    "snowboard": 140.0,
    "sports ball": 22.0,
    "kite": 100.0,
    "baseball bat": 70.0,
    "baseball glove": 25.0,
    "skateboard": 80.0,
    "surfboard": 180.0,
    "tennis racket": 70.0,
    # Kitchen
    "bottle": 7.0,
    "wine glass": 8.0,
    "cup": 8.0,
    "fork": 15.0,
    "knife": 20.0,
    "spoon": 15.0,
    "bowl": 15.0,
    # Food
    "banana": 18.0,
    "apple": 8.0,
    "sandwich": 15.0,
    "orange": 7.0,
    "broccoli": 12.0,
    "carrot": 15.0,
    "hot dog": 15.0,
    "pizza": 30.0,
    "donut": 8.0,
    "cake": 25.0,
    # Furniture
    "chair": 45.0,
    "couch": 200.0,
    "potted plant": 30.0,
    "bed": 200.0,
    "dining table": 150.0,
    "toilet": 60.0,
    # Electronics
    "tv": 100.0,
    "laptop": 35.0,
    "mouse": 6.0,
    "remote": 15.0,
    "keyboard": 36.0,
    "cell phone": 7.0,
    # Appliances
    "microwave": 50.0,
    "oven": 60.0,
    "toaster": 30.0,
    "sink": 60.0,
    "refrigerator": 80.0,
    # Indoor
    "book": 15.0,
    "clock": 25.0,
    "vase": 20.0,
    "scissors": 15.0,
    "teddy bear": 30.0,
    "hair drier": 20.0,
    "toothbrush": 15.0,
}


def lookup(class_label: str) -> Optional[float]:
    """Return the known width (cm) for a class label, or None if unknown."""
    if not class_label:
        return None
    return KNOWN_OBJECT_WIDTHS_CM.get(class_label.lower())


class ObjectCatalog:
    """
    Case-insensitive class -> width lookup.

    Wraps the default table and optionally layers deployment-specific
    overrides on top (e.g. the exact width of the mug on your desk).
    """

    def __init__(self, overrides: Optional[Dict[str, float]] = None):
        """
        Args:
            overrides: Extra or replacement widths in cm, keyed by class label
        """
        self.widths: Dict[str, float] = dict(KNOWN_OBJECT_WIDTHS_CM)

        for label, width in (overrides or {}).items():
            width = float(width)
            if width <= 0:
                raise ValueError(f"Catalog width for '{label}' must be positive, got {width}")
            self.widths[label.lower()] = width

        if overrides:
            print(f"[Catalog] {len(overrides)} override(s) applied: {sorted(overrides)}")

    def lookup(self, class_label: str) -> Optional[float]:
        if not class_label:
            return None
        return self.widths.get(class_label.lower())

    def known_classes(self) -> List[str]:
        return sorted(self.widths)

    def __contains__(self, class_label: str) -> bool:
        return self.lookup(class_label) is not None

    def __len__(self) -> int:
        return len(self.widths)
