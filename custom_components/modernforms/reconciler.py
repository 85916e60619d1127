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

"""Turn an appliance snapshot into per-entity attribute events.

The appliance keeps its last fan speed while the fan is off. Home Assistant
must still see speed "off" in that case, so the exposed speed follows the
switch while ``last_running_speed`` always tracks the retained value.

``last_running_speed`` and ``direction`` are sent on every cycle. ``switch``,
``speed``, ``level`` and ``preset_level`` are only sent when they differ from
the cached value.
"""

from __future__ import annotations

from dataclasses import replace

from .const import (
    ATTR_DIRECTION,
    ATTR_LAST_RUNNING_SPEED,
    ATTR_LEVEL,
    ATTR_PRESET_LEVEL,
    ATTR_SPEED,
    ATTR_SWITCH,
)
from .models import (
    AttributeEvent,
    EntityConfig,
    FanDelta,
    LightDelta,
    LogicalFanState,
    LogicalLightState,
    PhysicalState,
)
from .speed import SPEED_OFF, to_logical

UNIT_PERCENT = "%"


def _switch(on: bool) -> str:
    return "on" if on else "off"


def reconcile_fan(prev: LogicalFanState | None, physical: PhysicalState) -> FanDelta:
    prev = prev or LogicalFanState()
    decoded = to_logical(physical.fan_speed)
    switch = _switch(physical.fan_on)
    events = [
        AttributeEvent(
            ATTR_LAST_RUNNING_SPEED,
            decoded,
            f"Fan last running speed was set to {decoded}",
        )
    ]
    if physical.fan_on:
        effective = decoded
        speed_desc = f"Fan speed was set to {decoded}"
    else:
        effective = SPEED_OFF
        speed_desc = "Fan speed was set to off due to fan being off"
    if effective != prev.speed:
        events.append(AttributeEvent(ATTR_SPEED, effective, speed_desc))
    if switch != prev.switch:
        events.append(AttributeEvent(ATTR_SWITCH, switch, f"Fan was turned {switch}"))
    events.append(
        AttributeEvent(
            ATTR_DIRECTION,
            physical.fan_direction,
            f"Fan direction was set to {physical.fan_direction}",
        )
    )
    return tuple(events)


def reconcile_light(prev: LogicalLightState | None, physical: PhysicalState) -> LightDelta:
    prev = prev or LogicalLightState()
    switch = _switch(physical.light_on)
    level = physical.light_brightness
    events: list[AttributeEvent] = []
    if switch != prev.switch:
        events.append(AttributeEvent(ATTR_SWITCH, switch, f"Light was turned {switch}"))
    if level != prev.level:
        events.append(
            AttributeEvent(ATTR_LEVEL, level, f"Light level was set to {level}%", UNIT_PERCENT)
        )
        events.append(
            AttributeEvent(
                ATTR_PRESET_LEVEL,
                level,
                f"Light preset level was set to {level}%",
                UNIT_PERCENT,
            )
        )
    return tuple(events)


def reconcile(
    prev_fan: LogicalFanState | None,
    prev_light: LogicalLightState | None,
    physical: PhysicalState,
    config: EntityConfig,
) -> tuple[FanDelta, LightDelta]:
    """Compute the events needed to bring both caches in line with ``physical``."""
    fan_delta = reconcile_fan(prev_fan, physical) if config.fan_enabled else ()
    light_delta = reconcile_light(prev_light, physical) if config.light_enabled else ()
    return fan_delta, light_delta


def _apply(state, delta):
    changes = {event.name: event.value for event in delta}
    return replace(state, **changes)


def apply_fan_delta(state: LogicalFanState | None, delta: FanDelta) -> LogicalFanState:
    return _apply(state or LogicalFanState(), delta)


def apply_light_delta(state: LogicalLightState | None, delta: LightDelta) -> LogicalLightState:
    return _apply(state or LogicalLightState(), delta)
