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
from homeassistant.components.light import ATTR_BRIGHTNESS, ColorMode, LightEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers import entity_platform
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import (
    ATTR_LEVEL,
    ATTR_PRESET_LEVEL,
    SERVICE_SET_LEVEL,
    ha_brightness_to_level,
    level_to_ha_brightness,
)
from .entity import ModernFormsChildEntity
from .models import EntityRole, LightDelta, LogicalLightState
from .reconciler import apply_light_delta, reconcile_light

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
):
    shared = entry.runtime_data
    coordinator = shared["coordinator"]

    def _factory() -> ModernFormsLight:
        return ModernFormsLight(coordinator, shared["parent_id"], shared["device_info"])

    shared["host"].register_platform(EntityRole.LIGHT, async_add_entities, _factory)

    platform = entity_platform.async_get_current_platform()
    platform.async_register_entity_service(
        SERVICE_SET_LEVEL,
        {vol.Required(ATTR_LEVEL): vol.All(vol.Coerce(int), vol.Range(min=0, max=100))},
        "async_set_level",
    )

    await coordinator.lifecycle.async_reconcile_role(EntityRole.LIGHT, coordinator.config)


class ModernFormsLight(ModernFormsChildEntity, LightEntity):
    role = EntityRole.LIGHT
    _attr_supported_color_modes = {ColorMode.BRIGHTNESS}
    _attr_color_mode = ColorMode.BRIGHTNESS
    _attr_icon = "mdi:ceiling-light"

    logical_state: LogicalLightState | None

    def _reconcile_initial(self) -> LightDelta:
        return reconcile_light(self.logical_state, self.coordinator.data)

    def _fold(self, delta: LightDelta) -> LogicalLightState:
        return apply_light_delta(self.logical_state, delta)

    @property
    def _cached(self) -> LogicalLightState:
        return self.logical_state or LogicalLightState()

    @property
    def is_on(self) -> bool | None:
        switch = self._cached.switch
        return None if switch is None else switch == "on"

    @property
    def brightness(self) -> int | None:
        level = self._cached.level
        return None if level is None else level_to_ha_brightness(level)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        return {ATTR_PRESET_LEVEL: self._cached.preset_level}

    async def async_turn_on(self, **kwargs: Any) -> None:
        level = ha_brightness_to_level(kwargs.get(ATTR_BRIGHTNESS))
        if level is None:
            # Plain turn on restores the preset level
            await self.coordinator.async_turn_on(EntityRole.LIGHT)
            return
        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug("set level d=%s level=%s", self.entity_id, level)
        # turn_on always switches the light on
        await self.coordinator.async_set_level(level, turn_on=True)

    async def async_turn_off(self, **kwargs: Any) -> None:
        await self.coordinator.async_turn_off(EntityRole.LIGHT)

    async def async_set_level(self, level: int) -> None:
        await self.coordinator.async_set_level(level)

