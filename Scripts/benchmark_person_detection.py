from __future__ import annotations

import argparse
import time
from pathlib import Path
from typing import List

from person_kit import (
    BenchmarkMetrics,
    PipelineConfig,
    format_latency,
    load_ground_truth,
    load_pipeline,
    match_detections,
    performance_grade,
    read_image,
)


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Score person detection against labelled images (precision/recall/F1/IoU) and time it."
    )
    parser.add_argument("--images", default="test-images", help="Directory holding the labelled images.")
    parser.add_argument(
        "--ground-truth", default=None, help="Ground truth JSON (default: <images>/ground_truth.json)."
    )
    parser.add_argument("--model", default="models/yolov8n.onnx", help="Path to a YOLOv8 model (.onnx/.torchscript).")
    parser.add_argument("--backend", default=None, help="Force backend: onnxruntime / torchscript.")
    parser.add_argument("--imgsz", type=int, default=640, help="Model input size (e.g., 640).")
    parser.add_argument("--conf", type=float, default=0.25, help="Confidence threshold.")
    parser.add_argument("--iou", type=float, default=0.45, help="IoU threshold for NMS.")
    parser.add_argument("--match-iou", type=float, default=0.5, help="IoU needed to count a true positive.")
    parser.add_argument("--warmup", type=int, default=1, help="Untimed passes over the first image.")
    args = parser.parse_args()

    if args.imgsz < 32:
        raise ValueError("--imgsz must be >= 32")
    if args.warmup < 0:
        raise ValueError("--warmup must be >= 0")
    if not 0.0 < args.match_iou <= 1.0:
        raise ValueError("--match-iou must be in (0, 1]")

    images_dir = Path(args.images)
    gt_path = Path(args.ground_truth) if args.ground_truth else images_dir / "ground_truth.json"
    ground_truth = load_ground_truth(gt_path)
    if not ground_truth:
        raise RuntimeError(f"No annotations in {gt_path}")

    config = PipelineConfig(input_resolution=args.imgsz, confidence_threshold=args.conf, iou_threshold=args.iou)
    metrics = BenchmarkMetrics()
    timings: List[float] = []

    with load_pipeline(args.model, backend=args.backend, config=config) as pipeline:
        first = read_image(images_dir / ground_truth[0].filename)
        for _ in range(args.warmup):
            pipeline.detect(first)

        for gt in ground_truth:
            image = read_image(images_dir / gt.filename)
            t0 = time.perf_counter()
            detections = pipeline.detect(image)
            timings.append(time.perf_counter() - t0)
            metrics.add(match_detections(detections, gt.persons, iou_threshold=args.match_iou))

    print("Person Detection Benchmark")
    print("=" * 80)
    print(f"  Precision:    {metrics.precision * 100:.2f}%")
    print(f"  Recall:       {metrics.recall * 100:.2f}%")
    print(f"  F1 Score:     {metrics.f1_score * 100:.2f}%")
    print(f"  Average IoU:  {metrics.average_iou * 100:.2f}%")
    print(f"  TP/FP/FN:     {metrics.true_positives}/{metrics.false_positives}/{metrics.false_negatives}")
    print(format_latency("  Latency", timings))
    print(f"Performance Grade: {performance_grade(metrics.f1_score)}")
    print("=" * 80)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
