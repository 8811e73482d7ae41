from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Any, BinaryIO, Mapping, Optional, Union

import httpx

from .config import Settings, get_settings
from .errors import PredictionCreateError, PredictionReloadError, UploadError
from .models import Envelope, UploadResult
from .prediction import Prediction
from .retry import RetryPolicy

logger = logging.getLogger(__name__)

FileInput = Union[str, os.PathLike, bytes, BinaryIO]


class WaveSpeed:
    """Async client for the WaveSpeed image-generation API."""

    result_path = "predictions/{prediction_id}/result"
    upload_path = "media/upload/binary"

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        poll_interval: Optional[float] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._settings = settings or get_settings(
            api_key,
            base_url=base_url,
            poll_interval=poll_interval,
            timeout=timeout,
            max_retries=max_retries,
        )
        self._api_key = self._settings.api_key
        self._retry = RetryPolicy()
        # Per-attempt deadlines are enforced in request(); httpx's own timeout stays out of the way.
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(None))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.base_url!r})"

    @property
    def base_url(self) -> str:
        return self._settings.base_url

    @property
    def poll_interval(self) -> float:
        return self._settings.poll_interval

    @property
    def timeout(self) -> float:
        return self._settings.timeout

    @property
    def max_retries(self) -> int:
        return self._settings.max_retries

    async def __aenter__(self) -> WaveSpeed:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _build_url(self, path: str) -> str:
        base = self.base_url if self.base_url.endswith("/") else f"{self.base_url}/"
        # Not urljoin: a ":" before the first "/" (as in "flux:dev") would parse as a scheme.
        return f"{base}{path.lstrip('/')}"

    def _build_headers(self, headers: Optional[Mapping[str, str]], upload: bool) -> dict[str, str]:
        merged = dict(headers or {})
        merged["Authorization"] = f"Bearer {self._api_key}"
        if not upload:
            merged["Content-Type"] = "application/json"
        return merged

    def _backoff_time(self, attempt: int) -> float:
        return self._retry.backoff_time(attempt)

    async def request(
        self,
        path: str,
        *,
        method: str = "GET",
        json: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        files: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        upload: bool = False,
    ) -> httpx.Response:
        """Send a request with a per-attempt deadline, retrying transient failures.

        429 is retried for any method, 5xx only for GET, and timeouts or connection
        errors always. Any other response is returned as-is for the caller to inspect.
        Once the retry budget is spent the last response is returned, or the last
        transport error re-raised.
        """
        method = method.upper()
        effective_timeout = self.timeout if timeout is None else timeout
        budget = self.max_retries if max_retries is None else max_retries
        url = self._build_url(path)
        request_headers = self._build_headers(headers, upload)

        attempt = 0
        while True:
            try:
                response = await asyncio.wait_for(
                    self._client.request(
                        method,
                        url,
                        json=json,
                        params=params,
                        files=files,
                        headers=request_headers,
                    ),
                    timeout=effective_timeout,
                )
            except Exception as exc:
                if not self._retry.should_retry_error(exc) or attempt >= budget:
                    raise
                delay = self._backoff_time(attempt)
                attempt += 1
                logger.warning(
                    "Request failed with error %r, retrying in %dms (attempt %d/%d)",
                    exc,
                    round(delay * 1000),
                    attempt,
                    budget,
                )
                await asyncio.sleep(delay)
                continue

            if attempt >= budget or not self._retry.should_retry_status(response.status_code, method):
                return response
            delay = self._backoff_time(attempt)
            attempt += 1
            logger.warning(
                "Request failed with status %d, retrying in %dms (attempt %d/%d)",
                response.status_code,
                round(delay * 1000),
                attempt,
                budget,
            )
            await asyncio.sleep(delay)

    async def create(
        self,
        model_id: str,
        input: Mapping[str, Any],
        *,
        webhook: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
    ) -> Prediction:
        """Submit a prediction without waiting for it to finish."""
        params = {"webhook": webhook} if webhook else None
        resp = await self.request(
            model_id,
            method="POST",
            json=dict(input),
            params=params,
            headers=headers,
            timeout=timeout,
            max_retries=max_retries,
        )
        prediction = Prediction.from_response(resp, self, PredictionCreateError, require_success=True)
        logger.debug("Created prediction %s for %s (%s)", prediction.id, model_id, prediction.status.value)
        return prediction

    async def get(self, prediction_id: str) -> Prediction:
        """Fetch the current state of a prediction by id."""
        resp = await self.request(self.result_path.format(prediction_id=prediction_id))
        return Prediction.from_response(resp, self, PredictionReloadError)

    async def run(
        self,
        model_id: str,
        input: Mapping[str, Any],
        *,
        webhook: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
    ) -> Prediction:
        """Submit a prediction and wait until it completes or fails."""
        prediction = await self.create(
            model_id,
            input,
            webhook=webhook,
            headers=headers,
            timeout=timeout,
            max_retries=max_retries,
        )
        return await prediction.wait()

    @staticmethod
    def _read_file(file: FileInput, filename: Optional[str]) -> tuple[str, bytes]:
        if isinstance(file, (str, os.PathLike)):
            path = Path(file)
            return filename or path.name, path.read_bytes()
        if isinstance(file, (bytes, bytearray)):
            return filename or "upload.bin", bytes(file)
        content = file.read()
        name = filename or Path(getattr(file, "name", "") or "upload.bin").name
        return name, content

    async def upload(
        self,
        file: FileInput,
        *,
        filename: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
    ) -> str:
        """Upload a binary file and return its download URL."""
        # Read once so a retried attempt can resend the same bytes.
        name, content = self._read_file(file, filename)
        resp = await self.request(
            self.upload_path,
            method="POST",
            files={"file": (name, content)},
            timeout=timeout,
            max_retries=max_retries,
            upload=True,
        )
        envelope = Envelope.from_response(resp, UploadError, require_success=True)
        try:
            result = UploadResult.model_validate(envelope.data)
        except ValueError:
            raise UploadError(resp.status_code, resp.text) from None
        logger.debug("Uploaded %s (%s bytes) to %s", name, len(content), result.download_url)
        return result.download_url
