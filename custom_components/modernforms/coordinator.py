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

"""Command, refetch and reconcile sequencing for one appliance.

Every mutating command is followed by a full state query; the command reply
is never trusted as the settled state. Commands and polls share one lock so
that at most one exchange with the appliance is in flight at a time.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from .client import ModernFormsClient
from .commands import (
    build_change_direction,
    build_cycle_speed,
    build_set_direction,
    build_set_level,
    build_set_speed,
    build_turn_off,
    build_turn_on,
)
from .exceptions import InvalidSpeedError, MalformedResponseError, TransportError
from .lifecycle import EntityLifecycleManager
from .models import EntityConfig, EntityRole, LogicalFanState, PhysicalState
from .reconciler import reconcile
from .speed import SPEED_OFF


class OrchestratorState(Enum):
    IDLE = "idle"
    COMMAND_IN_FLIGHT = "command_in_flight"
    REFETCHING = "refetching"
    RECONCILING = "reconciling"


def interval_for(config: EntityConfig) -> timedelta | None:
    secs = config.polling_interval_seconds
    return None if secs == 0 else timedelta(seconds=int(secs))


class ModernFormsCoordinator(DataUpdateCoordinator[PhysicalState]):
    def __init__(
        self,
        hass: HomeAssistant,
        client: ModernFormsClient,
        lifecycle: EntityLifecycleManager,
        config: EntityConfig,
        config_entry: ConfigEntry | None = None,
    ):
        super().__init__(
            hass,
            logger=logging.getLogger(__name__),
            config_entry=config_entry,
            name="modernforms",
            update_interval=interval_for(config),
        )
        self.client = client
        self.lifecycle = lifecycle
        self.config = config
        self.state = OrchestratorState.IDLE
        self._lock = asyncio.Lock()
        self._scheduled_poll = False

    def _set_state(self, state: OrchestratorState) -> None:
        if self.logger.isEnabledFor(logging.DEBUG) and state is not self.state:
            self.logger.debug("state %s -> %s", self.state.value, state.value)
        self.state = state

    async def _async_update_data(self) -> PhysicalState:
        """Poll: the state query is itself the refetch."""
        if self.logger.isEnabledFor(logging.DEBUG):
            trigger = "timer" if self._scheduled_poll else "manual"
            self.logger.debug(
                "poll start trigger=%s interval=%s host=%s",
                trigger,
                self.update_interval,
                self.client.host,
            )
        async with self._lock:
            try:
                return await self._async_refetch_and_reconcile()
            except (TransportError, MalformedResponseError) as err:
                raise UpdateFailed(f"Status fetch from {self.client.host} failed: {err}") from err
            finally:
                self._set_state(OrchestratorState.IDLE)

    async def _handle_refresh_interval(self, _now: datetime | None = None) -> None:
        self._scheduled_poll = True
        try:
            await super()._handle_refresh_interval(_now)
        finally:
            self._scheduled_poll = False

    async def async_poll(self) -> None:
        await self.async_refresh()

    async def _async_refetch_and_reconcile(self) -> PhysicalState:
        self._set_state(OrchestratorState.REFETCHING)
        physical = await self.client.async_fetch_state()
        self._set_state(OrchestratorState.RECONCILING)
        self._reconcile(physical)
        return physical

    def _reconcile(self, physical: PhysicalState) -> None:
        fan = self.lifecycle.entity(EntityRole.FAN)
        light = self.lifecycle.entity(EntityRole.LIGHT)
        fan_delta, light_delta = reconcile(
            fan.logical_state if fan is not None else None,
            light.logical_state if light is not None else None,
            physical,
            self.config,
        )
        if fan is not None and fan_delta:
            fan.apply_delta(fan_delta)
        if light is not None and light_delta:
            light.apply_delta(light_delta)
        if self.data is not None and self.data != physical and self.logger.isEnabledFor(
            logging.DEBUG
        ):
            self.logger.debug(
                "poll mismatch host=%s changed_keys=%s",
                self.client.host,
                _changed_keys(self.data.as_dict(), physical.as_dict()),
            )

    async def async_execute_command(self, body: dict[str, Any]) -> bool:
        """Send ``body`` then refetch and reconcile; False when the cycle aborted."""
        async with self._lock:
            try:
                self._set_state(OrchestratorState.COMMAND_IN_FLIGHT)
                try:
                    await self.client.async_send_command(body)
                except (TransportError, MalformedResponseError) as err:
                    self.logger.error("Error sending command %s: %s", body, err)
                    return False
                try:
                    physical = await self._async_refetch_and_reconcile()
                except (TransportError, MalformedResponseError) as err:
                    self.logger.error("Error fetching state after command %s: %s", body, err)
                    return False
            finally:
                self._set_state(OrchestratorState.IDLE)
        self.async_set_updated_data(physical)
        return True

    async def async_update_config(self, config: EntityConfig) -> None:
        old = self.update_interval
        self.config = config
        self.update_interval = interval_for(config)
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug("interval changed old=%s new=%s", old, self.update_interval)
        if old != self.update_interval:
            # The base class only re-arms its timer after a refresh
            self._unschedule_refresh()
            if self.update_interval is not None and self._listeners:
                self._schedule_refresh()
        await self.lifecycle.async_reconcile_entities(config)

    # High-level entity commands

    async def async_turn_on(self, role: EntityRole | str) -> bool:
        role = self.lifecycle.require(role)
        preset = None
        if role is EntityRole.LIGHT:
            light = self.lifecycle.entity(EntityRole.LIGHT)
            if light is not None and light.logical_state is not None:
                preset = light.logical_state.preset_level
        return await self.async_execute_command(build_turn_on(role, preset))

    async def async_turn_off(self, role: EntityRole | str) -> bool:
        return await self.async_execute_command(build_turn_off(self.lifecycle.require(role)))

    async def async_set_speed(self, speed: str, *, turn_on: bool | None = None) -> bool:
        return await self.async_execute_command(
            build_set_speed(speed, self.config, turn_on=turn_on)
        )

    async def async_set_level(self, level: int, *, turn_on: bool | None = None) -> bool:
        return await self.async_execute_command(
            build_set_level(level, self.config, turn_on=turn_on)
        )

    def _fan_state(self) -> LogicalFanState:
        fan = self.lifecycle.entity(EntityRole.FAN)
        if fan is None or fan.logical_state is None:
            return LogicalFanState()
        return fan.logical_state

    async def async_cycle_speed(self) -> bool:
        current = self._fan_state().speed
        if current is None or current == SPEED_OFF:
            self.logger.error("No current speed to cycle from")
            return False
        try:
            body = build_cycle_speed(current, self.config)
        except InvalidSpeedError as err:
            self.logger.error("%s", err)
            return False
        return await self.async_execute_command(body)

    async def async_change_direction(self) -> bool:
        current = self._fan_state().direction
        try:
            body = build_change_direction(current)
        except ValueError as err:
            self.logger.error("%s", err)
            return False
        return await self.async_execute_command(body)

    async def async_set_direction(self, direction: str) -> bool:
        return await self.async_execute_command(build_set_direction(direction))

    async def async_reboot(self) -> None:
        async with self._lock:
            await self.client.async_reboot()

    async def async_refresh_state(self) -> None:
        await self.async_refresh()

    def get_diagnostics_data(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "update_interval": str(self.update_interval) if self.update_interval else None,
            "last_update_success": self.last_update_success,
            "physical_state": self.data.as_dict() if self.data is not None else None,
            "config": {
                "fan_enabled": self.config.fan_enabled,
                "light_enabled": self.config.light_enabled,
                "low_speed_value": self.config.low_speed_value,
                "turn_on_with_set_speed": self.config.turn_on_with_set_speed,
                "turn_on_with_set_level": self.config.turn_on_with_set_level,
                "polling_interval_seconds": self.config.polling_interval_seconds,
            },
        }


def _changed_keys(prev: dict[str, object], new: dict[str, object]) -> list[str]:
    changed = {k for k in set(prev) | set(new) if prev.get(k) != new.get(k)}
    return sorted(changed)
