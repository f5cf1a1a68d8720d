"""
Evaluation metrics for distance estimates

Compares per-frame distance estimates with ground-truth tape measurements:
- Coverage (how often an estimate was produced at all)
- Absolute and relative error of the estimates that were produced
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np


@dataclass
class DistanceEvaluationResult:
    """Container for evaluation metrics."""
    num_samples: int
    num_estimated: int
    coverage: float       # num_estimated / num_samples

    mae_cm: float         # Mean Absolute Error
    rmse_cm: float        # Root Mean Square Error
    abs_rel: float        # Absolute Relative Error
    delta_1: float        # Fraction with max(pred/gt, gt/pred) < 1.25

    def to_dict(self) -> Dict:
        return {
            "samples": {
                "total": self.num_samples,
                "estimated": self.num_estimated,
                "coverage": self.coverage
            },
            "distance": {
                "mae_cm": self.mae_cm,
                "rmse_cm": self.rmse_cm,
                "abs_rel": self.abs_rel,
                "delta_1": self.delta_1
            }
        }

    def summary(self) -> str:
        lines = [
            "=" * 50,
            "DISTANCE EVALUATION RESULTS",
            "=" * 50,
            "",
            "COVERAGE:",
            f"  Samples: {self.num_samples}",
            f"  Estimated: {self.num_estimated}",
            f"  Coverage: {self.coverage:.3f}",
            "",
            "DISTANCE ERROR:",
            f"  MAE: {self.mae_cm:.2f} cm",
            f"  RMSE: {self.rmse_cm:.2f} cm",
            f"  Abs Relative: {self.abs_rel:.3f}",
            f"  delta < 1.25: {self.delta_1:.3f}",
            "=" * 50
        ]
        return "\n".join(lines)


class DistanceEvaluator:
    """Accumulates (estimate, ground truth) pairs and reports error metrics."""

    def __init__(self):
        self.reset()

    def reset(self):
        """Reset accumulated samples."""
        self.predictions: List[Optional[float]] = []
        self.ground_truth: List[float] = []
        self.class_labels: List[Optional[str]] = []

    def add_sample(
        self,
        predicted_cm: Optional[float],
        actual_cm: float,
        class_label: Optional[str] = None
    ):
        """
        Add evaluation sample.

        Args:
            predicted_cm: Estimated distance, None if none was produced
            actual_cm: Measured distance
            class_label: Class of the measured object (for per-class metrics)
        """
        if actual_cm <= 0:
            raise ValueError(f"Ground-truth distance must be positive, got {actual_cm}")
        self.predictions.append(predicted_cm)
        self.ground_truth.append(float(actual_cm))
        self.class_labels.append(class_label)

    def compute_metrics(self, class_label: Optional[str] = None) -> DistanceEvaluationResult:
        """Compute metrics over all samples, or only one class."""
        pairs = [
            (p, g) for p, g, c in zip(self.predictions, self.ground_truth, self.class_labels)
            if class_label is None or c == class_label
        ]
        total = len(pairs)
        estimated = [(p, g) for p, g in pairs if p is not None]

        if not estimated:
            return DistanceEvaluationResult(
                num_samples=total,
                num_estimated=0,
                coverage=0.0,
                mae_cm=0.0,
                rmse_cm=0.0,
                abs_rel=0.0,
                delta_1=0.0
            )

        pred = np.array([p for p, _ in estimated], dtype=np.float64)
        gt = np.array([g for _, g in estimated], dtype=np.float64)
        thresh = np.maximum(gt / pred, pred / gt)

        return DistanceEvaluationResult(
            num_samples=total,
            num_estimated=len(estimated),
            coverage=len(estimated) / total,
            mae_cm=float(np.mean(np.abs(pred - gt))),
            rmse_cm=float(np.sqrt(np.mean((pred - gt) ** 2))),
            abs_rel=float(np.mean(np.abs(pred - gt) / gt)),
            delta_1=float(np.mean(thresh < 1.25))
        )

    def per_class_metrics(self) -> Dict[str, DistanceEvaluationResult]:
        labels = sorted({c for c in self.class_labels if c is not None})
        return {label: self.compute_metrics(label) for label in labels}
