"""
Client for the remote dental X-ray analysis service.
"""
import asyncio
import logging
from pathlib import Path
from typing import Optional

import requests
from pydantic import ValidationError

from dentalbot.config import config
from dentalbot.models.analysis import AnalysisResult

logger = logging.getLogger("dentalbot.services.image_analysis")

UPLOAD_FIELD = "xray"
UPLOAD_FILENAME = "dental_image.jpg"
UPLOAD_CONTENT_TYPE = "image/jpeg"


class ImageAnalysisError(Exception):
    """Base class for failures talking to the analysis service."""


class AttachmentReadError(ImageAnalysisError):
    """The attachment reference could not be read as a file."""


class AnalysisTimeoutError(ImageAnalysisError):
    """The analysis service did not answer within the timeout."""


class AnalysisNetworkError(ImageAnalysisError):
    """The analysis service could not be reached."""


class AnalysisServiceError(ImageAnalysisError):
    """The analysis service answered with a non-2xx status."""

    def __init__(self, status_code: int, detail: str = ""):
        message = f"Analysis service returned HTTP {status_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.status_code = status_code


class InvalidAnalysisResponseError(ImageAnalysisError):
    """The analysis service answered with an unusable body."""


class ImageAnalysisClient:
    """Posts one image to the analysis endpoint and parses the result."""

    def __init__(self, url: Optional[str] = None, timeout: Optional[float] = None):
        self.url = url or config.AI_ANALYSIS_URL
        self.timeout = timeout or config.AI_ANALYSIS_TIMEOUT

    async def analyze(self, image_path: str) -> AnalysisResult:
        """
        Analyze a single image.

        Args:
            image_path: Local path of the uploaded image

        Returns:
            Parsed analysis result

        Raises:
            ImageAnalysisError: On any read, transport, status or body failure
        """
        image_bytes = await asyncio.to_thread(self._read_image, image_path)
        logger.info(f"Sending image {image_path} ({len(image_bytes)} bytes) to {self.url}")
        return await asyncio.to_thread(self._post, image_bytes)

    def _read_image(self, image_path: str) -> bytes:
        if not image_path or not isinstance(image_path, str):
            raise AttachmentReadError("Invalid image path")
        path = Path(image_path)
        if not path.is_file():
            raise AttachmentReadError(f"File does not exist: {image_path}")
        try:
            return path.read_bytes()
        except OSError as e:
            raise AttachmentReadError(f"Cannot read {image_path}: {e}") from e

    def _post(self, image_bytes: bytes) -> AnalysisResult:
        files = {UPLOAD_FIELD: (UPLOAD_FILENAME, image_bytes, UPLOAD_CONTENT_TYPE)}
        try:
            response = requests.post(self.url, files=files, timeout=self.timeout)
        except requests.Timeout as e:
            raise AnalysisTimeoutError(f"No answer within {self.timeout:g}s") from e
        except requests.RequestException as e:
            raise AnalysisNetworkError(str(e)) from e

        if not 200 <= response.status_code < 300:
            raise AnalysisServiceError(response.status_code, response.text[:200])

        if not response.content:
            raise InvalidAnalysisResponseError("Empty response from AI analysis service")
        try:
            payload = response.json()
        except ValueError as e:
            raise InvalidAnalysisResponseError(f"Response is not JSON: {e}") from e
        if not isinstance(payload, dict):
            raise InvalidAnalysisResponseError("Response is not a JSON object")

        try:
            return AnalysisResult.model_validate(payload)
        except ValidationError as e:
            raise InvalidAnalysisResponseError(f"Response does not match schema: {e}") from e
