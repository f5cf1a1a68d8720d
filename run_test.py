#!/usr/bin/env python3
"""
objmeasure - Scenario Test Script

Replays a synthetic "object moving towards the camera" sequence through a
MeasurementSession, evaluates the distance estimates against the ground
truth used to generate the sequence, and saves the results.

Usage:
    python run_test.py                          # Default cup scenario
    python run_test.py --object "cell phone"    # Other catalog class
    python run_test.py --calibrate 60           # Calibrate on the first frame at 60 cm
    python run_test.py --config configs/measurement.yaml
"""

import argparse
import json
import os
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np

sys.path.insert(0, str(Path(__file__).parent))

from objmeasure.catalog import lookup
from objmeasure.config import MeasurementConfig
from objmeasure.detector import Detection, ReplayDetector
from objmeasure.evaluation import DistanceEvaluator
from objmeasure.focal_length import focal_length_from_fov
from objmeasure.session import FrameMeasurement, MeasurementSession


def build_approach_sequence(
    class_label: str,
    image_size: Tuple[int, int],
    fov_degrees: float,
    start_cm: float,
    end_cm: float,
    num_frames: int,
    occluded_frames: List[int],
    aspect: float = 1.2
) -> Tuple[List[List[Detection]], List[float]]:
    """
    Generate per-frame detections of an object approaching the camera.

    The object stays centred; its box grows as 1 / distance. A distractor of
    another class is reported first in every frame so the tracker has to
    skip it. Frames listed in occluded_frames contain only the distractor.

    Returns:
        (frames of detections, ground-truth distance per frame)
    """
    width, height = image_size
    real_width_cm = lookup(class_label)
    if real_width_cm is None:
        raise ValueError(f"'{class_label}' is not in the object catalog")

    focal_length = focal_length_from_fov(width, fov_degrees)
    distances = np.linspace(start_cm, end_cm, num_frames)

    frames = []
    for i, distance in enumerate(distances):
        box_w = real_width_cm * focal_length / distance
        box_h = box_w * aspect
        x = (width - box_w) / 2
        y = (height - box_h) / 2

        distractor = Detection("person", 0.8, (20.0, 20.0, 150.0, 400.0))
        if i in occluded_frames:
            frames.append([distractor])
        else:
            frames.append([distractor, Detection(class_label, 0.9, (x, y, box_w, box_h))])

    return frames, [float(d) for d in distances]


def run_scenario(
    session: MeasurementSession,
    frames: List[List[Detection]],
    ground_truth: List[float],
    image_size: Tuple[int, int],
    calibrate_cm: Optional[float] = None
) -> Tuple[List[FrameMeasurement], DistanceEvaluator]:
    """Select the object in the first frame and measure every frame."""
    print("\n" + "=" * 60)
    print("RUNNING APPROACH SCENARIO")
    print("=" * 60)

    width, height = image_size
    blank = np.zeros((height, width, 3), dtype=np.uint8)

    first = frames[0][-1]
    cx, cy = first.center
    if session.select_at(cx, cy, frames[0]) is None:
        raise RuntimeError("Could not select the target object")

    if calibrate_cm is not None:
        session.calibrate_from_tracked(calibrate_cm)

    session.detector = ReplayDetector(frames)
    evaluator = DistanceEvaluator()
    results = []

    for truth in ground_truth:
        result = session.process(blank)
        results.append(result)
        evaluator.add_sample(result.distance.distance_cm, truth, result.tracked.class_label)
        print(f"  {result.summary()}  (truth={truth:.0f}cm)")

    return results, evaluator


def main():
    parser = argparse.ArgumentParser(description="objmeasure scenario test")
    parser.add_argument('--config', type=str, help='Path to YAML config')
    parser.add_argument('--object', type=str, default='cup', help='Catalog class to simulate')
    parser.add_argument('--width', type=int, default=1280, help='Image width')
    parser.add_argument('--height', type=int, default=720, help='Image height')
    parser.add_argument('--start-cm', type=float, default=150.0, help='Starting distance')
    parser.add_argument('--end-cm', type=float, default=40.0, help='Final distance')
    parser.add_argument('--frames', type=int, default=12, help='Number of frames')
    parser.add_argument('--occlude', type=int, nargs='*', default=[4, 5], help='Occluded frame indices')
    parser.add_argument('--calibrate', type=float, default=None,
                        help='Calibrate on the first frame assuming this distance (cm)')
    parser.add_argument('--output-dir', type=str, default='./outputs', help='Output directory')

    args = parser.parse_args()
    os.makedirs(args.output_dir, exist_ok=True)

    config = MeasurementConfig.from_yaml(args.config) if args.config else MeasurementConfig()
    image_size = (args.width, args.height)

    print("\n" + "=" * 60)
    print("OBJMEASURE SCENARIO TEST")
    print("=" * 60)
    print(f"\nConfiguration:")
    print(f"  Object: {args.object}")
    print(f"  Image: {args.width}x{args.height}, FOV {config.horizontal_fov_degrees} deg")
    print(f"  Distance: {args.start_cm:.0f}cm -> {args.end_cm:.0f}cm over {args.frames} frames")
    print(f"  Occluded frames: {args.occlude}")
    print(f"  Output dir: {args.output_dir}")

    frames, ground_truth = build_approach_sequence(
        args.object,
        image_size,
        config.horizontal_fov_degrees,
        args.start_cm,
        args.end_cm,
        args.frames,
        args.occlude
    )

    session = MeasurementSession(config=config)
    results, evaluator = run_scenario(session, frames, ground_truth, image_size, args.calibrate)

    metrics = evaluator.compute_metrics()
    print("\n" + metrics.summary())

    output = {
        "object": args.object,
        "image_size": list(image_size),
        "ground_truth_cm": ground_truth,
        "frames": [r.to_dict() for r in results],
        "metrics": metrics.to_dict(),
        "session": session.get_session_info()
    }
    json_path = os.path.join(args.output_dir, "scenario_results.json")
    with open(json_path, 'w') as f:
        json.dump(output, f, indent=2)
    print(f"\nResults saved to: {json_path}")

    print("\n" + "=" * 60)
    print("TEST COMPLETE")
    print("=" * 60)
    return metrics


if __name__ == "__main__":
    main()
