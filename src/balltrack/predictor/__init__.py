from balltrack.predictor.base import Predictor
from balltrack.predictor.opencv_dnn import OpenCVDnnPredictor

__all__ = ["Predictor", "OpenCVDnnPredictor"]
