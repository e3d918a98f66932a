from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import cv2
import numpy as np

from balltrack.errors import ModelLoadError, PredictorUnavailable
from balltrack.predictor.base import Predictor


class OpenCVDnnPredictor(Predictor):
    """Runs an exported detector through OpenCV DNN.

    The forward pass runs in a worker thread; callers must not overlap
    ``predict`` calls because the underlying network is not reentrant.
    """

    def __init__(self, model_path: str | None, input_size: int = 640, device: str = "cpu") -> None:
        self._model_path = model_path
        self._input_size = input_size
        self._device = device
        self._net: Any | None = None
        self._logger = logging.getLogger("balltrack.predictor.opencv")
        self._output_shape_logged = False

    def load(self) -> None:
        if not self._model_path:
            raise ModelLoadError("OpenCV predictor requires model.path")

        path = Path(self._model_path)
        if not path.exists():
            raise ModelLoadError(f"Model file missing: {path}")

        try:
            self._net = cv2.dnn.readNet(str(path))
        except cv2.error as exc:
            raise ModelLoadError(f"OpenCV could not read model {path}: {exc}") from exc

        if self._device == "cuda":
            self._net.setPreferableBackend(cv2.dnn.DNN_BACKEND_CUDA)
            self._net.setPreferableTarget(cv2.dnn.DNN_TARGET_CUDA)
        elif self._device == "opencl":
            self._net.setPreferableBackend(cv2.dnn.DNN_BACKEND_OPENCV)
            self._net.setPreferableTarget(cv2.dnn.DNN_TARGET_OPENCL)
        else:
            self._net.setPreferableBackend(cv2.dnn.DNN_BACKEND_OPENCV)
            self._net.setPreferableTarget(cv2.dnn.DNN_TARGET_CPU)

        self._logger.info(
            "model loaded path=%s input_size=%d device=%s",
            path,
            self._input_size,
            self._device,
        )

    def _forward(self, image: Any) -> np.ndarray:
        if self._net is None:
            raise PredictorUnavailable("Predictor not loaded")

        blob = cv2.dnn.blobFromImage(
            image,
            1 / 255.0,
            (self._input_size, self._input_size),
            swapRB=True,
            crop=False,
        )
        self._net.setInput(blob)
        output = np.asarray(self._net.forward(), dtype=np.float32)
        if not self._output_shape_logged:
            self._output_shape_logged = True
            self._logger.info("model output shape=%s", tuple(output.shape))
        return output

    async def predict(self, image: Any) -> np.ndarray:
        return await asyncio.to_thread(self._forward, image)

    def warmup(self) -> None:
        if self._net is None:
            return
        warm_frame = np.zeros((self._input_size, self._input_size, 3), dtype=np.uint8)
        self._forward(warm_frame)

    def name(self) -> str:
        return "opencv-dnn"

    def device_info(self) -> str:
        return self._device
