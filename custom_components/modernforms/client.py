# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Trevor Baker, all rights reserved.
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#   http://www.apache.org/licenses/LICENSE-2.0
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from __future__ import annotations

import logging
import time
from typing import Any

import httpx
from homeassistant.core import HomeAssistant
from homeassistant.helpers.httpx_client import get_async_client

from .commands import QUERY_BODY, REBOOT_BODY, build_set_direction
from .const import (
    API_PATH,
    DEFAULT_HTTP_TIMEOUT_SECS,
    REBOOT_TIMEOUT_SECS,
    SLOW_RESPONSE_WARNING_MS,
)
from .exceptions import MalformedResponseError, TransportError, TransportTimeoutError
from .metrics import ConnectionMetrics
from .models import PhysicalState

_LOGGER = logging.getLogger(__name__)


class ModernFormsClient:
    """Local HTTP client for a Modern Forms fan.

    Every exchange is a single ``POST /mf`` with a JSON body; the appliance
    answers with its full state. Nothing here retries.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        host: str,
        *,
        timeout_s: int | float | None = None,
        session: httpx.AsyncClient | None = None,
    ):
        self.hass = hass
        self.host = host
        self._timeout_s = float(timeout_s if timeout_s is not None else DEFAULT_HTTP_TIMEOUT_SECS)
        self._session = session
        self.metrics = ConnectionMetrics()

    @property
    def url(self) -> str:
        return f"http://{self.host}{API_PATH}"

    def _client(self) -> httpx.AsyncClient:
        if self._session is None:
            self._session = get_async_client(self.hass)
        return self._session

    def apply_timeout(self, timeout_s: int | float | None) -> None:
        if timeout_s is not None:
            self._timeout_s = float(timeout_s)

    @property
    def timeout_seconds(self) -> float:
        return self._timeout_s

    async def async_send_command(
        self, body: dict[str, Any], *, timeout_s: float | None = None
    ) -> dict[str, Any]:
        """POST ``body`` and return the decoded JSON object."""
        timeout_value = self._timeout_s if timeout_s is None else timeout_s
        t0 = time.monotonic()
        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug("send host=%s body=%s", self.host, body)
        try:
            resp = await self._client().post(
                self.url,
                json=body,
                timeout=httpx.Timeout(timeout_value),
            )
            resp.raise_for_status()
        except httpx.TimeoutException as exc:
            self.metrics.record_timeout()
            raise TransportTimeoutError(
                f"Timed out after {timeout_value:.1f}s sending command to {self.host}"
            ) from exc
        except httpx.HTTPStatusError as exc:
            self.metrics.record_command(success=False)
            raise TransportError(
                f"HTTP {exc.response.status_code} from {self.host}"
            ) from exc
        except httpx.HTTPError as exc:
            self.metrics.record_command(success=False)
            raise TransportError(
                f"Error sending command to {self.host}: {type(exc).__name__}"
            ) from exc

        latency_ms = (time.monotonic() - t0) * 1000
        self.metrics.record_command(success=True, latency_ms=latency_ms)
        if latency_ms > SLOW_RESPONSE_WARNING_MS:
            _LOGGER.warning(
                "Slow response from Modern Forms fan at %s: %.1f seconds",
                self.host,
                latency_ms / 1000,
            )

        try:
            payload = resp.json()
        except ValueError as exc:
            self.metrics.record_malformed()
            raise MalformedResponseError(f"Non-JSON response from {self.host}") from exc
        if not isinstance(payload, dict):
            self.metrics.record_malformed()
            raise MalformedResponseError(
                f"Expected a JSON object from {self.host}, got {type(payload).__name__}"
            )
        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug("recv host=%s ms=%.0f keys=%s", self.host, latency_ms, list(payload))
        return payload

    async def async_fetch_state(self) -> PhysicalState:
        payload = await self.async_send_command(dict(QUERY_BODY))
        try:
            return PhysicalState.from_payload(payload)
        except MalformedResponseError:
            self.metrics.record_malformed()
            raise

    async def async_reboot(self) -> None:
        """Ask the appliance to reboot; it drops the connection while doing so."""
        try:
            payload = await self.async_send_command(
                dict(REBOOT_BODY), timeout_s=REBOOT_TIMEOUT_SECS
            )
        except (TransportError, MalformedResponseError) as exc:
            if _LOGGER.isEnabledFor(logging.DEBUG):
                _LOGGER.debug("reboot host=%s no reply (%s)", self.host, type(exc).__name__)
            return
        _LOGGER.debug("Device not rebooted and unexpected response received: %s", payload)

    async def async_set_direction(self, direction: str) -> dict[str, Any]:
        return await self.async_send_command(build_set_direction(direction))

    def get_diagnostics_data(self) -> dict[str, Any]:
        return {
            "host": self.host,
            "timeout_seconds": self._timeout_s,
            "metrics": self.metrics.to_dict(),
        }
