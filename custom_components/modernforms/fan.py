# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Any

from homeassistant.components.fan import FanEntity, FanEntityFeature
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers import entity_platform
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import (
    ATTR_LAST_RUNNING_SPEED,
    ATTR_SPEED,
    ATTR_SUPPORTED_SPEEDS,
    SERVICE_CHANGE_DIRECTION,
    SERVICE_CYCLE_SPEED,
)
from .entity import ModernFormsChildEntity
from .models import EntityRole, FanDelta, LogicalFanState
from .reconciler import apply_fan_delta, reconcile_fan
from .speed import (
    LOGICAL_SPEEDS,
    SPEED_OFF,
    SPEED_ON,
    percentage_to_speed,
    speed_to_percentage,
)

# Mirrors the speed vocabulary the fan accepts, including the switch words
SUPPORTED_SPEEDS = [*LOGICAL_SPEEDS, SPEED_OFF, SPEED_ON]


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
):
    shared = entry.runtime_data
    coordinator = shared["coordinator"]

    def _factory() -> ModernFormsFan:
        return ModernFormsFan(coordinator, shared["parent_id"], shared["device_info"])

    shared["host"].register_platform(EntityRole.FAN, async_add_entities, _factory)

    platform = entity_platform.async_get_current_platform()
    platform.async_register_entity_service(SERVICE_CYCLE_SPEED, {}, "async_cycle_speed")
    platform.async_register_entity_service(
        SERVICE_CHANGE_DIRECTION, {}, "async_change_direction"
    )

    await coordinator.lifecycle.async_reconcile_role(EntityRole.FAN, coordinator.config)


class ModernFormsFan(ModernFormsChildEntity, FanEntity):
    role = EntityRole.FAN
    _attr_supported_features = (
        FanEntityFeature.SET_SPEED
        | FanEntityFeature.DIRECTION
        | FanEntityFeature.TURN_OFF
        | FanEntityFeature.TURN_ON
    )
    _attr_speed_count = len(LOGICAL_SPEEDS)
    _attr_icon = "mdi:ceiling-fan"

    logical_state: LogicalFanState | None

    def _reconcile_initial(self) -> FanDelta:
        return reconcile_fan(self.logical_state, self.coordinator.data)

    def _fold(self, delta: FanDelta) -> LogicalFanState:
        return apply_fan_delta(self.logical_state, delta)

    @property
    def _cached(self) -> LogicalFanState:
        return self.logical_state or LogicalFanState()

    @property
    def is_on(self) -> bool | None:
        switch = self._cached.switch
        return None if switch is None else switch == "on"

    @property
    def percentage(self) -> int | None:
        return speed_to_percentage(self._cached.speed)

    @property
    def current_direction(self) -> str | None:
        return self._cached.direction

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        cached = self._cached
        return {
            ATTR_SPEED: cached.speed,
            ATTR_LAST_RUNNING_SPEED: cached.last_running_speed,
            ATTR_SUPPORTED_SPEEDS: SUPPORTED_SPEEDS,
        }

    async def async_turn_on(
        self,
        percentage: int | None = None,
        preset_mode: str | None = None,
        **kwargs: Any,
    ) -> None:
        if percentage is None:
            await self.coordinator.async_turn_on(EntityRole.FAN)
            return
        await self.coordinator.async_set_speed(percentage_to_speed(percentage), turn_on=True)

    async def async_turn_off(self, **kwargs: Any) -> None:
        await self.coordinator.async_turn_off(EntityRole.FAN)

    async def async_set_percentage(self, percentage: int) -> None:
        await self.coordinator.async_set_speed(percentage_to_speed(percentage))

    async def async_set_direction(self, direction: str) -> None:
        await self.coordinator.async_set_direction(direction)

    async def async_cycle_speed(self) -> None:
        await self.coordinator.async_cycle_speed()

    async def async_change_direction(self) -> None:
        await self.coordinator.async_change_direction()
