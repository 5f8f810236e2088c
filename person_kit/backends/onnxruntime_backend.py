from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

import numpy as np


PathLike = Union[str, Path]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OnnxRuntimeBackendConfig:
    """
    Configuration for ONNX Runtime inference.

    - providers: ORT execution providers (e.g., ["CUDAExecutionProvider", "CPUExecutionProvider"])
    - input_name/output_name: override auto-selected I/O names (yolov8 exports use "images"/"output0")
    - intra_op_num_threads: 0 lets ORT decide
    """

    providers: Optional[Sequence[str]] = None
    input_name: Optional[str] = None
    output_name: Optional[str] = None
    intra_op_num_threads: int = 0

    def __post_init__(self) -> None:
        if self.intra_op_num_threads < 0:
            raise ValueError("intra_op_num_threads must be >= 0")


class OnnxRuntimeBackend:
    """
    ONNX Runtime session wrapper.

    Expects an NCHW float32 blob shaped (1, 3, S, S) and returns the primary output,
    typically (1, 4 + C, N). `InferenceSession.run` may be called from several threads
    at once, so callers do not need to serialize `infer`.

    Use as a context manager (or call `close()`) to release the session.
    """

    def __init__(self, model_path: PathLike, cfg: OnnxRuntimeBackendConfig = OnnxRuntimeBackendConfig()):
        try:
            import onnxruntime as ort  # type: ignore
        except Exception as e:  # pragma: no cover
            raise ImportError(
                "onnxruntime is required for the ONNX backend. Install it with `pip install onnxruntime` "
                "(or `onnxruntime-gpu`)."
            ) from e

        self._ort = ort
        self.model_path = Path(model_path)
        if not self.model_path.exists():
            raise FileNotFoundError(str(self.model_path))

        sess_opts = ort.SessionOptions()
        if cfg.intra_op_num_threads:
            sess_opts.intra_op_num_threads = cfg.intra_op_num_threads
        providers = list(cfg.providers) if cfg.providers is not None else None
        self.session = ort.InferenceSession(str(self.model_path), sess_options=sess_opts, providers=providers)

        self.input_name = cfg.input_name or self.session.get_inputs()[0].name
        self.output_name = cfg.output_name or self.session.get_outputs()[0].name
        logger.info(
            "ONNX model loaded: %s (input=%s, output=%s, providers=%s)",
            self.model_path,
            self.input_name,
            self.output_name,
            ",".join(self.providers_in_use),
        )

    @property
    def providers_in_use(self) -> Sequence[str]:
        return tuple(self.session.get_providers())

    @property
    def available_providers(self) -> Sequence[str]:
        return tuple(self._ort.get_available_providers())

    def infer(self, blob: np.ndarray, extra_inputs: Optional[Dict[str, Any]] = None) -> np.ndarray:
        if self.session is None:
            raise RuntimeError("OnnxRuntimeBackend is closed.")
        inputs: Dict[str, Any] = {self.input_name: blob}
        if extra_inputs:
            inputs.update(extra_inputs)
        outputs = self.session.run([self.output_name], inputs)
        return outputs[0]

    def close(self) -> None:
        # ORT frees native resources when the session is garbage collected.
        self.session = None

    def __enter__(self) -> "OnnxRuntimeBackend":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
