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

"""Request bodies for the appliance ``/mf`` endpoint."""

from __future__ import annotations

from typing import Any

from .const import (
    DIRECTION_FORWARD,
    DIRECTION_REVERSE,
    DIRECTIONS,
    KEY_FAN_DIRECTION,
    KEY_FAN_ON,
    KEY_FAN_SPEED,
    KEY_LIGHT_BRIGHTNESS,
    KEY_LIGHT_ON,
    KEY_QUERY,
    KEY_REBOOT,
    clamp_level,
)
from .exceptions import UnknownChildEntityError
from .models import EntityConfig, EntityRole
from .speed import SPEED_OFF, SPEED_ON, next_cycle, to_physical

QUERY_BODY: dict[str, Any] = {KEY_QUERY: 1}
REBOOT_BODY: dict[str, Any] = {KEY_REBOOT: True}


def _role(role: EntityRole | str) -> EntityRole:
    try:
        return EntityRole(role)
    except ValueError as exc:
        raise UnknownChildEntityError(f"Unknown child entity: {role!r}") from exc


def build_turn_on(role: EntityRole | str, preset_level: int | None = None) -> dict[str, Any]:
    if _role(role) is EntityRole.LIGHT:
        body: dict[str, Any] = {KEY_LIGHT_ON: True}
        if preset_level:
            body[KEY_LIGHT_BRIGHTNESS] = clamp_level(preset_level)
        return body
    return {KEY_FAN_ON: True}


def build_turn_off(role: EntityRole | str) -> dict[str, Any]:
    if _role(role) is EntityRole.LIGHT:
        return {KEY_LIGHT_ON: False}
    return {KEY_FAN_ON: False}


def build_set_speed(
    speed: str, config: EntityConfig, *, turn_on: bool | None = None
) -> dict[str, Any]:
    """Body for a logical speed; "on" and "off" become switch commands.

    ``turn_on`` overrides the turn_on_with_set_speed option.
    """
    if speed == SPEED_OFF:
        return build_turn_off(EntityRole.FAN)
    if speed == SPEED_ON:
        return build_turn_on(EntityRole.FAN)
    body: dict[str, Any] = {KEY_FAN_SPEED: to_physical(speed, config.low_speed_value)}
    if config.turn_on_with_set_speed if turn_on is None else turn_on:
        body = {KEY_FAN_ON: True, **body}
    return body


def build_set_level(
    level: int, config: EntityConfig, *, turn_on: bool | None = None
) -> dict[str, Any]:
    """Body for a light level; level 0 is an off command."""
    level = clamp_level(level)
    if level == 0:
        return build_turn_off(EntityRole.LIGHT)
    body: dict[str, Any] = {KEY_LIGHT_BRIGHTNESS: level}
    if config.turn_on_with_set_level if turn_on is None else turn_on:
        body = {KEY_LIGHT_ON: True, **body}
    return body


def build_cycle_speed(current: str, config: EntityConfig) -> dict[str, Any]:
    """Raises InvalidSpeedError when ``current`` is off or unknown."""
    return {KEY_FAN_ON: True, KEY_FAN_SPEED: next_cycle(current, config.low_speed_value)}


def build_set_direction(direction: str) -> dict[str, Any]:
    if direction not in DIRECTIONS:
        raise ValueError(f"Invalid fan direction: {direction!r}")
    return {KEY_FAN_DIRECTION: direction}


def build_change_direction(current: str | None) -> dict[str, Any]:
    if current not in DIRECTIONS:
        raise ValueError(f"No current direction obtained ({current!r})")
    new = DIRECTION_REVERSE if current == DIRECTION_FORWARD else DIRECTION_FORWARD
    return build_set_direction(new)
