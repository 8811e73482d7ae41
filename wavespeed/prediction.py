from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Mapping

from pydantic import PrivateAttr, ValidationError

from .errors import APIError, PredictionReloadError, WaveSpeedError
from .models import TERMINAL_STATUSES, Envelope, PredictionData, PredictionStatus

if TYPE_CHECKING:
    import httpx

    from .client import WaveSpeed

logger = logging.getLogger(__name__)


class Prediction(PredictionData):
    """A remote image-generation job, kept current by ``reload`` and ``wait``.

    The instance is the stable handle for the job: ``reload`` overwrites its fields
    in place, so every holder of the reference sees the latest state.
    """

    _client: Any = PrivateAttr(default=None)

    @classmethod
    def from_payload(cls, data: Mapping[str, Any], client: WaveSpeed) -> Prediction:
        prediction = cls.model_validate(dict(data))
        prediction._client = client
        return prediction

    @classmethod
    def from_response(
        cls,
        response: httpx.Response,
        client: WaveSpeed,
        error_cls: type[APIError],
        *,
        require_success: bool = False,
    ) -> Prediction:
        envelope = Envelope.from_response(response, error_cls, require_success=require_success)
        if not isinstance(envelope.data, Mapping):
            raise error_cls(response.status_code, response.text)
        try:
            return cls.from_payload(envelope.data, client)
        except ValidationError:
            raise error_cls(response.status_code, response.text) from None

    @property
    def done(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def succeeded(self) -> bool:
        return self.status == PredictionStatus.COMPLETED

    def _bound_client(self) -> WaveSpeed:
        if self._client is None:
            raise WaveSpeedError(
                f"Prediction {self.id} is not bound to a client; build it with Prediction.from_payload()"
            )
        return self._client

    async def reload(self) -> Prediction:
        """Fetch the latest state from the service and apply it to this instance."""
        fresh = await self._bound_client().get(self.id)
        if fresh.id != self.id:
            raise PredictionReloadError(
                message=f"Failed to reload prediction: requested {self.id} but the service returned {fresh.id}",
            )
        if self.done and fresh.status != self.status:
            raise PredictionReloadError(
                message=(
                    f"Failed to reload prediction: {self.id} is {self.status.value} "
                    f"but the service reported {fresh.status.value}"
                ),
            )
        # Wholesale overwrite, never a field-by-field merge.
        for name in type(self).model_fields:
            setattr(self, name, getattr(fresh, name))
        logger.debug("Prediction %s reloaded with status %s", self.id, self.status.value)
        return self

    async def wait(self) -> Prediction:
        """Poll until the prediction reaches ``completed`` or ``failed``."""
        while not self.done:
            await asyncio.sleep(self._bound_client().poll_interval)
            await self.reload()
        return self
