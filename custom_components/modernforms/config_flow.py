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
from typing import Any

import voluptuous as vol
from homeassistant import config_entries

from .client import ModernFormsClient
from .const import (
    CONF_HOST,
    CONF_HTTP_TIMEOUT,
    DEFAULT_HTTP_TIMEOUT_SECS,
    DEFAULT_LOW_SPEED_VALUE,
    DEFAULT_POLL_SECS,
    DOMAIN,
    MAX_HTTP_TIMEOUT_SECS,
    MAX_POLL_SECS,
    MIN_HTTP_TIMEOUT_SECS,
    MIN_POLL_SECS,
    OPTION_FAN_ENABLED,
    OPTION_LIGHT_ENABLED,
    OPTION_LOW_SPEED_VALUE,
    OPTION_POLL_SECS,
    OPTION_TURN_ON_WITH_SET_LEVEL,
    OPTION_TURN_ON_WITH_SET_SPEED,
)
from .exceptions import MalformedResponseError, TransportError, TransportTimeoutError
from .speed import LOW_SPEED_VALUES

DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_HOST): str,
        vol.Optional(CONF_HTTP_TIMEOUT, default=DEFAULT_HTTP_TIMEOUT_SECS): vol.All(
            vol.Coerce(int), vol.Range(min=MIN_HTTP_TIMEOUT_SECS, max=MAX_HTTP_TIMEOUT_SECS)
        ),
    }
)

_LOGGER = logging.getLogger(__name__)


class ModernFormsConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    VERSION = 1

    async def async_step_user(self, user_input: dict[str, Any] | None = None):
        if user_input is None:
            return self.async_show_form(step_id="user", data_schema=DATA_SCHEMA)

        host = user_input[CONF_HOST].strip()
        errors: dict[str, str] = {}
        client_id: str | None = None
        try:
            client = ModernFormsClient(
                self.hass,
                host,
                timeout_s=user_input.get(CONF_HTTP_TIMEOUT, DEFAULT_HTTP_TIMEOUT_SECS),
            )
            state = await client.async_fetch_state()
            client_id = state.client_id
        except TransportTimeoutError as exc:
            _LOGGER.error("Timed out connecting to Modern Forms fan at %s", host)
            if _LOGGER.isEnabledFor(logging.DEBUG):
                _LOGGER.debug("Timeout details: %s", str(exc))
            errors["base"] = "timeout"
        except TransportError as exc:
            _LOGGER.error("Network connection to %s failed", host)
            if _LOGGER.isEnabledFor(logging.DEBUG):
                _LOGGER.debug("Network error details: %s", str(exc))
            errors["base"] = "cannot_connect"
        except MalformedResponseError as exc:
            _LOGGER.error("Device at %s did not answer like a Modern Forms fan", host)
            if _LOGGER.isEnabledFor(logging.DEBUG):
                _LOGGER.debug("Response error details: %s", str(exc))
            errors["base"] = "invalid_response"
        except Exception as exc:
            _LOGGER.error(
                "Unexpected error during setup: %s: %s",
                type(exc).__name__,
                str(exc),
            )
            if _LOGGER.isEnabledFor(logging.DEBUG):
                _LOGGER.debug("Full exception:", exc_info=True)
            errors["base"] = "unknown"

        if errors:
            return self.async_show_form(step_id="user", data_schema=DATA_SCHEMA, errors=errors)

        await self.async_set_unique_id(client_id or host)
        self._abort_if_unique_id_configured(updates={CONF_HOST: host})

        return self.async_create_entry(
            title=f"Modern Forms {host}",
            data={**user_input, CONF_HOST: host},
        )

    @staticmethod
    def async_get_options_flow(
        config_entry: config_entries.ConfigEntry,
    ) -> config_entries.OptionsFlow:
        return ModernFormsOptionsFlowHandler(config_entry)


class ModernFormsOptionsFlowHandler(config_entries.OptionsFlow):
    def __init__(self, config_entry: config_entries.ConfigEntry) -> None:
        # Older HA OptionsFlow.__init__ does not take config_entry; keep our
        # own reference instead of the deprecated self.config_entry
        try:
            super().__init__(config_entry)  # type: ignore[call-arg]
        except TypeError:
            super().__init__()
        self._entry = config_entry

    async def async_step_init(self, user_input: dict[str, Any] | None = None):
        raw_data = getattr(self._entry, "data", {})
        data_defaults = raw_data if isinstance(raw_data, dict) else {}

        if user_input is not None:
            # 0 disables polling; anything else is clamped into range
            raw_secs = user_input.get(OPTION_POLL_SECS, DEFAULT_POLL_SECS)
            secs = int(raw_secs)
            if secs != 0:
                secs = max(MIN_POLL_SECS, min(MAX_POLL_SECS, secs))

            http_raw = user_input.get(
                CONF_HTTP_TIMEOUT,
                data_defaults.get(CONF_HTTP_TIMEOUT, DEFAULT_HTTP_TIMEOUT_SECS),
            )
            if isinstance(http_raw, int | float | str):
                http_t = int(http_raw)
            else:
                http_t = int(DEFAULT_HTTP_TIMEOUT_SECS)
            http_t = max(MIN_HTTP_TIMEOUT_SECS, min(MAX_HTTP_TIMEOUT_SECS, http_t))

            low = int(user_input.get(OPTION_LOW_SPEED_VALUE, DEFAULT_LOW_SPEED_VALUE))
            low = max(LOW_SPEED_VALUES[0], min(LOW_SPEED_VALUES[-1], low))

            if _LOGGER.isEnabledFor(logging.DEBUG):
                if raw_secs != secs:
                    _LOGGER.debug("options poll interval clamped: %s -> %s", raw_secs, secs)
                else:
                    _LOGGER.debug("options poll interval set: %s", secs)
                _LOGGER.debug("options timeout set: http=%s low=%s", http_t, low)
            return self.async_create_entry(
                title="Modern Forms Options",
                data={
                    OPTION_FAN_ENABLED: bool(user_input.get(OPTION_FAN_ENABLED, True)),
                    OPTION_LIGHT_ENABLED: bool(user_input.get(OPTION_LIGHT_ENABLED, True)),
                    OPTION_LOW_SPEED_VALUE: low,
                    OPTION_TURN_ON_WITH_SET_SPEED: bool(
                        user_input.get(OPTION_TURN_ON_WITH_SET_SPEED, True)
                    ),
                    OPTION_TURN_ON_WITH_SET_LEVEL: bool(
                        user_input.get(OPTION_TURN_ON_WITH_SET_LEVEL, True)
                    ),
                    OPTION_POLL_SECS: secs,
                    CONF_HTTP_TIMEOUT: http_t,
                },
            )

        options = self._entry.options
        current_http = options.get(
            CONF_HTTP_TIMEOUT,
            data_defaults.get(CONF_HTTP_TIMEOUT, DEFAULT_HTTP_TIMEOUT_SECS),
        )
        schema = vol.Schema(
            {
                vol.Optional(
                    OPTION_FAN_ENABLED, default=options.get(OPTION_FAN_ENABLED, True)
                ): bool,
                vol.Optional(
                    OPTION_LIGHT_ENABLED, default=options.get(OPTION_LIGHT_ENABLED, True)
                ): bool,
                vol.Optional(
                    OPTION_LOW_SPEED_VALUE,
                    default=options.get(OPTION_LOW_SPEED_VALUE, DEFAULT_LOW_SPEED_VALUE),
                ): vol.All(vol.Coerce(int), vol.In(LOW_SPEED_VALUES)),
                vol.Optional(
                    OPTION_TURN_ON_WITH_SET_SPEED,
                    default=options.get(OPTION_TURN_ON_WITH_SET_SPEED, True),
                ): bool,
                vol.Optional(
                    OPTION_TURN_ON_WITH_SET_LEVEL,
                    default=options.get(OPTION_TURN_ON_WITH_SET_LEVEL, True),
                ): bool,
                vol.Optional(
                    OPTION_POLL_SECS,
                    default=options.get(OPTION_POLL_SECS, DEFAULT_POLL_SECS),
                ): vol.All(vol.Coerce(int), vol.Range(min=0, max=MAX_POLL_SECS)),
                vol.Optional(
                    CONF_HTTP_TIMEOUT,
                    default=current_http,
                ): vol.All(
                    vol.Coerce(int),
                    vol.Range(min=MIN_HTTP_TIMEOUT_SECS, max=MAX_HTTP_TIMEOUT_SECS),
                ),
            }
        )
        return self.async_show_form(step_id="init", data_schema=schema)
