"""Demo-mode detection used when the labeling API is unavailable."""

from __future__ import annotations

import random
from typing import Optional

from nutrisprout.vision.foods import FOOD_DATABASE
from nutrisprout.vision.models import AnalysisResult

SIMULATED_CONFIDENCE = 0.85
MIN_ITEMS = 2
MAX_ITEMS = 4


def simulate_detection(rng: Optional[random.Random] = None) -> AnalysisResult:
    """Pick 2-4 distinct foods from the food table at random.

    Pass a seeded ``random.Random`` for repeatable output.
    """
    rng = rng or random.Random()
    count = rng.randint(MIN_ITEMS, MAX_ITEMS)
    keys = rng.sample(list(FOOD_DATABASE), count)
    items = [FOOD_DATABASE[key].to_food_item() for key in keys]

    return AnalysisResult(
        success=True,
        items=items,
        confidence=SIMULATED_CONFIDENCE,
        message=f"Detected {len(items)} food items (DEMO MODE)",
        simulated=True,
    )
