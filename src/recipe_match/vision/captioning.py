from __future__ import annotations

"""
captioning.py

Purpose:
    Image -> caption -> ingredients.

    The caption model is an external collaborator; this module only wraps
    the call and feeds the caption text to CaptionParser.

Providers:
    - HuggingFaceCaptioner: Hugging Face Inference API over httpx
      (default model Salesforce/blip-image-captioning-large).
    - LocalCaptioner: transformers "image-to-text" pipeline running in
      process. Optional; if transformers / Pillow are not installed the
      captioner logs a warning and reports itself disabled.

Failures raise CaptionError. An empty caption from a provider is an error
at this layer; CaptionParser itself treats empty text as zero ingredients.
"""

import datetime
import io
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

import httpx

from recipe_match.config import DEFAULT_CAPTION_MODEL, Settings
from recipe_match.ingredients.caption_parser import CaptionParser
from recipe_match.logging_utils import get_logger

logger = get_logger("captioning")

# Hugging Face imports – optional
try:
    from transformers import pipeline
except ImportError:  # transformers not installed
    pipeline = None

HF_INFERENCE_URL = "https://api-inference.huggingface.co/models/{model_id}"


class CaptionError(Exception):
    """Captioning provider failure (network, API error, empty caption)."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"vision detection error ({provider}): {message}")
        self.provider = provider
        self.message = message


@dataclass
class DetectionResult:
    ingredients: List[str]
    raw_response: str
    confidence: float
    provider: str
    metadata: Dict[str, Any] = field(default_factory=dict)


class Captioner(Protocol):
    provider: str
    model_id: str

    def __enter__(self) -> "Captioner":
        ...

    def __exit__(self, *exc_info: Any) -> None:
        ...

    def caption(self, image_bytes: bytes, filename: str = "") -> str:
        ...

    def close(self) -> None:
        ...


def confidence_for(ingredient_count: int) -> float:
    if ingredient_count == 0:
        return 0.3
    if ingredient_count == 1:
        return 0.6
    return 0.85


# ----------------------------------------------------------------------
# Hugging Face Inference API
# ----------------------------------------------------------------------
class HuggingFaceCaptioner:
    provider = "huggingface"

    def __init__(
        self,
        api_token: str,
        model_id: Optional[str] = None,
        timeout: float = 60.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.api_token = api_token
        self.model_id = model_id or DEFAULT_CAPTION_MODEL
        # Only a client created here is closed by close()
        self._owns_client = client is None
        self.client = client if client is not None else httpx.Client(timeout=timeout)

    def __enter__(self) -> "HuggingFaceCaptioner":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    @property
    def url(self) -> str:
        return HF_INFERENCE_URL.format(model_id=self.model_id)

    def caption(self, image_bytes: bytes, filename: str = "") -> str:
        if not self.api_token:
            raise CaptionError(self.provider, "HUGGINGFACE_API_KEY is not set")

        logger.info(
            "Calling Hugging Face model '%s' for '%s' (%d bytes)",
            self.model_id,
            filename,
            len(image_bytes),
            extra={
                "invoking_func": "caption",
                "invoking_purpose": "Caption a food image via Hugging Face Inference API",
                "next_step": "POST raw image bytes",
                "resolution": "",
            },
        )

        try:
            resp = self.client.post(
                self.url,
                content=image_bytes,
                headers={"Authorization": f"Bearer {self.api_token}"},
            )
        except httpx.HTTPError as exc:
            raise CaptionError(self.provider, f"API request failed: {exc}") from exc

        if resp.status_code != 200:
            raise CaptionError(self.provider, self._error_message(resp))

        try:
            payload = resp.json()
        except ValueError as exc:
            raise CaptionError(self.provider, f"failed to parse response: {exc}") from exc

        if not isinstance(payload, list) or not payload:
            raise CaptionError(self.provider, "no results returned from API")

        first = payload[0] if isinstance(payload[0], dict) else {}
        caption = (first.get("generated_text") or "").strip()
        if not caption:
            raise CaptionError(self.provider, "empty caption returned")
        return caption

    def _error_message(self, resp: httpx.Response) -> str:
        try:
            body = resp.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get("error"):
            estimated = body.get("estimated_time")
            if estimated:
                try:
                    wait = f"{float(estimated):.1f} seconds"
                except (TypeError, ValueError):
                    wait = str(estimated)
                return f"model is loading, estimated time: {wait}. Please try again"
            return f"API error: {body['error']}"

        if resp.status_code == 404:
            return (
                f"model not found: {self.model_id}. Please check the model ID or try "
                f"'{DEFAULT_CAPTION_MODEL}'"
            )
        return f"API returned status {resp.status_code}: {resp.text}"


# ----------------------------------------------------------------------
# Local transformers pipeline
# ----------------------------------------------------------------------
class LocalCaptioner:
    provider = "local"

    def __init__(self, model_id: Optional[str] = None) -> None:
        self.model_id = model_id or DEFAULT_CAPTION_MODEL
        self._pipe = None

        if pipeline is None:
            logger.warning(
                "transformers library not installed; local captioning disabled",
                extra={
                    "invoking_func": "__init__",
                    "invoking_purpose": "Load local image-to-text pipeline",
                    "next_step": "Use HuggingFaceCaptioner instead",
                    "resolution": "Install the 'local' extra (transformers, torch, pillow)",
                },
            )
            return

        try:
            self._pipe = pipeline("image-to-text", model=self.model_id)
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "Failed to load image-to-text model '%s': %s",
                self.model_id,
                exc,
                extra={
                    "invoking_func": "__init__",
                    "invoking_purpose": "Load local image-to-text pipeline",
                    "next_step": "Disable local captioning",
                    "resolution": "Check model name / network / disk cache and retry",
                },
                exc_info=True,
            )
            self._pipe = None

    def __enter__(self) -> "LocalCaptioner":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._pipe = None

    def enabled(self) -> bool:
        return self._pipe is not None

    def caption(self, image_bytes: bytes, filename: str = "") -> str:
        if not self.enabled():
            raise CaptionError(self.provider, "local captioning model is not available")

        from PIL import Image

        try:
            image = Image.open(io.BytesIO(image_bytes)).convert("RGB")
            out = self._pipe(image)
        except Exception as exc:  # noqa: BLE001
            raise CaptionError(self.provider, f"captioning failed: {exc}") from exc

        caption = ""
        if out and isinstance(out, list) and isinstance(out[0], dict):
            caption = (out[0].get("generated_text") or "").strip()
        if not caption:
            raise CaptionError(self.provider, "empty caption returned")
        return caption


def build_captioner(settings: Settings) -> Captioner:
    if settings.caption_provider == "local":
        return LocalCaptioner(settings.caption_model_id)
    return HuggingFaceCaptioner(
        api_token=settings.huggingface_api_key,
        model_id=settings.caption_model_id,
        timeout=settings.caption_timeout_seconds,
    )


# ----------------------------------------------------------------------
# Entry point used by the service / CLI
# ----------------------------------------------------------------------
def detect_ingredients(
    captioner: Captioner,
    parser: CaptionParser,
    image_bytes: bytes,
    filename: str = "",
    max_bytes: Optional[int] = None,
) -> DetectionResult:
    """Caption an image and parse the caption into canonical ingredients."""
    if not image_bytes:
        raise CaptionError(captioner.provider, "empty image")
    if max_bytes is not None and len(image_bytes) > max_bytes:
        raise CaptionError(
            captioner.provider,
            f"image is {len(image_bytes)} bytes; limit is {max_bytes}",
        )

    caption = captioner.caption(image_bytes, filename)
    ingredients = parser.extract_ingredients(caption)

    logger.info(
        "Detected %d ingredients from caption: %s",
        len(ingredients),
        caption,
        extra={
            "invoking_func": "detect_ingredients",
            "invoking_purpose": "Turn an image into canonical ingredient names",
            "next_step": "Match ingredients against the catalog",
            "resolution": "Try a clearer photo" if not ingredients else "",
        },
    )

    return DetectionResult(
        ingredients=ingredients,
        raw_response=caption,
        confidence=confidence_for(len(ingredients)),
        provider=captioner.provider,
        metadata={
            "model": captioner.model_id,
            "caption": caption,
            "filename": filename,
            "image_size": len(image_bytes),
            "detected_at": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        },
    )
