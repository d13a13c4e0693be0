"""Food detection through the Google Cloud Vision label API."""

from __future__ import annotations

import base64
import logging
import random
from pathlib import Path
from typing import Any, Optional

import httpx

from nutrisprout.config import Settings, get_settings
from nutrisprout.vision.foods import match_labels
from nutrisprout.vision.models import AnalysisResult
from nutrisprout.vision.simulator import simulate_detection

logger = logging.getLogger(__name__)

# Confidence reported when the API returned no scored labels
DEFAULT_CONFIDENCE = 0.7

PLACEHOLDER_API_KEY = "YOUR_GOOGLE_CLOUD_VISION_API_KEY"


class VisionClient:
    """Detects foods in images.

    Without a configured API key, or when the API call fails for any reason,
    results come from the demo-mode simulator instead.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        endpoint: str = "https://vision.googleapis.com/v1/images:annotate",
        max_results: int = 15,
        transport: Optional[httpx.BaseTransport] = None,
        rng: Optional[random.Random] = None,
    ):
        self.api_key = api_key
        self.endpoint = endpoint
        self.max_results = max_results
        self.transport = transport
        self.rng = rng

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs: Any) -> "VisionClient":
        settings = settings or get_settings()
        return cls(
            api_key=settings.vision.api_key,
            endpoint=settings.vision.endpoint,
            max_results=settings.vision.max_results,
            **kwargs,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) and self.api_key != PLACEHOLDER_API_KEY

    def _request_body(self, image_bytes: bytes) -> dict[str, Any]:
        return {
            "requests": [
                {
                    "image": {"content": base64.b64encode(image_bytes).decode("ascii")},
                    "features": [
                        {"type": "LABEL_DETECTION", "maxResults": self.max_results}
                    ],
                }
            ]
        }

    def fetch_labels(self, image_bytes: bytes) -> list[dict[str, Any]]:
        """Call the API and return its label annotations.

        Raises:
            httpx.HTTPError: On transport failures
            RuntimeError: On a non-200 response
        """
        with httpx.Client(transport=self.transport) as client:
            resp = client.post(
                self.endpoint,
                params={"key": self.api_key},
                json=self._request_body(image_bytes),
                headers={"Accept": "application/json"},
            )

        logger.debug("Vision API response status: %s", resp.status_code)
        if resp.status_code != 200:
            raise RuntimeError(f"API Error {resp.status_code}: {resp.text}")

        responses = resp.json().get("responses") or [{}]
        return responses[0].get("labelAnnotations") or []

    def analyze_image(self, image_bytes: bytes) -> AnalysisResult:
        """Detect foods in raw image bytes."""
        if not self.is_configured:
            logger.info("No vision API key configured, using simulated detection")
            return simulate_detection(self.rng)

        try:
            labels = self.fetch_labels(image_bytes)
        except (httpx.HTTPError, RuntimeError, ValueError) as e:
            logger.warning("Vision API call failed, using demo mode: %s", e)
            result = simulate_detection(self.rng)
            result.message = f"API Error: {e} - Using demo mode as fallback"
            return result

        descriptions = [label["description"] for label in labels if label.get("description")]
        logger.debug("Detected labels: %s", ", ".join(descriptions))

        items = match_labels(descriptions)
        if labels:
            confidence = sum(label.get("score", 0.0) for label in labels) / len(labels)
        else:
            confidence = DEFAULT_CONFIDENCE

        return AnalysisResult(
            success=True,
            items=items,
            confidence=confidence,
            message=f"Detected {len(items)} food items",
        )

    def analyze_file(self, path: Path) -> AnalysisResult:
        """Detect foods in an image file."""
        try:
            image_bytes = Path(path).read_bytes()
        except OSError as e:
            logger.warning("Could not read image %s: %s", path, e)
            result = simulate_detection(self.rng)
            result.message = f"Error: {e} - Using demo mode"
            return result
        return self.analyze_image(image_bytes)


def analyze_food_image(path: Path, client: Optional[VisionClient] = None) -> AnalysisResult:
    """Detect foods in an image file using the configured client."""
    client = client or VisionClient.from_settings()
    return client.analyze_file(path)
