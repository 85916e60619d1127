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

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers.typing import ConfigType

from .client import ModernFormsClient
from .const import (
    CONF_HOST,
    CONF_HTTP_TIMEOUT,
    DEFAULT_HTTP_TIMEOUT_SECS,
    DOMAIN,
    PLATFORMS,
)
from .coordinator import ModernFormsCoordinator
from .device_utils import create_device_info
from .lifecycle import EntityLifecycleManager, HassChildEntityHost
from .models import EntityConfig

_LOGGER = logging.getLogger(__name__)

# Integration is config-entry only (no YAML config)
CONFIG_SCHEMA = cv.config_entry_only_config_schema(DOMAIN)


async def async_setup(hass: HomeAssistant, config: ConfigType) -> bool:
    return True


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    host = entry.data[CONF_HOST]
    http_timeout = entry.options.get(
        CONF_HTTP_TIMEOUT, entry.data.get(CONF_HTTP_TIMEOUT, DEFAULT_HTTP_TIMEOUT_SECS)
    )
    client = ModernFormsClient(hass, host, timeout_s=http_timeout)
    config = EntityConfig.from_options(entry.options)

    parent_id = entry.unique_id or entry.entry_id
    child_host = HassChildEntityHost(hass, parent_id)
    lifecycle = EntityLifecycleManager(child_host)
    coordinator = ModernFormsCoordinator(hass, client, lifecycle, config, config_entry=entry)
    if _LOGGER.isEnabledFor(logging.DEBUG):
        _LOGGER.debug(
            "setup host=%s interval=%s fan=%s light=%s low=%s",
            host,
            coordinator.update_interval,
            config.fan_enabled,
            config.light_enabled,
            config.low_speed_value,
        )

    # Raises ConfigEntryNotReady when the appliance cannot be reached
    await coordinator.async_config_entry_first_refresh()

    client_id = coordinator.data.client_id if coordinator.data is not None else None
    entry.runtime_data = {
        "client": client,
        "coordinator": coordinator,
        "host": child_host,
        "parent_id": parent_id,
        "device_info": create_device_info(parent_id, host, entry.title, client_id),
    }

    async def _async_options_updated(hass: HomeAssistant, updated_entry: ConfigEntry) -> None:
        client.apply_timeout(
            updated_entry.options.get(
                CONF_HTTP_TIMEOUT,
                updated_entry.data.get(CONF_HTTP_TIMEOUT, DEFAULT_HTTP_TIMEOUT_SECS),
            )
        )
        await coordinator.async_update_config(EntityConfig.from_options(updated_entry.options))

    entry.async_on_unload(entry.add_update_listener(_async_options_updated))

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)

    _LOGGER.info("Modern Forms fan connected at %s", host)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    return await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
