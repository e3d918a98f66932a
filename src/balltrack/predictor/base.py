from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import numpy as np


class Predictor(ABC):
    @abstractmethod
    def load(self) -> None:
        """Load model artifacts and initialize the runtime."""

    @abstractmethod
    async def predict(self, image: Any) -> np.ndarray:
        """Run the model on one frame and return its raw prediction array."""

    @abstractmethod
    def name(self) -> str:
        """Return stable predictor name for logging and metrics."""

    def warmup(self) -> None:
        """Run one-time warmup inference if supported."""
        return

    def device_info(self) -> str:
        return "cpu"
