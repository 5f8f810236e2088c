from __future__ import annotations

import argparse

from person_kit import PipelineConfig, load_pipeline


def main() -> int:
    parser = argparse.ArgumentParser(description="Detect people in an image and print their boxes.")
    parser.add_argument("image", help="Path to an input image.")
    parser.add_argument("--model", default="models/yolov8n.onnx", help="Path to a YOLOv8 model (.onnx/.torchscript).")
    parser.add_argument("--backend", default=None, help="Force backend: onnxruntime / torchscript.")
    parser.add_argument("--imgsz", type=int, default=640, help="Model input size (e.g., 640).")
    parser.add_argument("--conf", type=float, default=0.25, help="Confidence threshold.")
    parser.add_argument("--iou", type=float, default=0.45, help="IoU threshold for NMS.")
    parser.add_argument("--largest", action="store_true", help="Only print the largest person box.")
    args = parser.parse_args()

    config = PipelineConfig(input_resolution=args.imgsz, confidence_threshold=args.conf, iou_threshold=args.iou)
    print(f"Detecting people in: {args.image}")

    with load_pipeline(args.model, backend=args.backend, config=config) as pipeline:
        if args.largest:
            print(pipeline.detect_largest_file(args.image))
            return 0

        detections = pipeline.detect_file(args.image)

    if not detections:
        print("No people detected.")
        return 0
    print(f"Found {len(detections)} person(s)")
    for i, det in enumerate(detections, start=1):
        print(f"{i}: {det}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
