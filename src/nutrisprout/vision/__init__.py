"""Food detection from meal photos."""

from nutrisprout.vision.client import VisionClient, analyze_food_image
from nutrisprout.vision.foods import FOOD_DATABASE, FoodInfo, match_labels
from nutrisprout.vision.models import AnalysisResult
from nutrisprout.vision.simulator import simulate_detection

__all__ = [
    "FOOD_DATABASE",
    "AnalysisResult",
    "FoodInfo",
    "VisionClient",
    "analyze_food_image",
    "match_labels",
    "simulate_detection",
]
