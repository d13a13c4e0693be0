"""Result type for food image analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from nutrisprout.tracking.models import FoodItem


@dataclass
class AnalysisResult:
    """Foods detected in an image.

    Attributes:
        success: Always True; failures degrade to simulated results
        items: Detected food items, flagged as AI generated
        confidence: Mean label score, or a fixed value when none was scored
        message: Human-readable summary
        simulated: True when the result came from demo mode
    """

    success: bool
    items: list[FoodItem] = field(default_factory=list)
    confidence: float = 0.0
    message: str = ""
    simulated: bool = False

    @property
    def total_calories(self) -> float:
        return sum(i.calories for i in self.items)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "detectedItems": [i.to_dict() for i in self.items],
            "confidence": self.confidence,
            "message": self.message,
            "simulated": self.simulated,
        }
