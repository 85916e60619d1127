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

"""Value types shared by the client, reconciler and entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from enum import StrEnum
from typing import Any

from .const import (
    DEFAULT_LOW_SPEED_VALUE,
    DEFAULT_POLL_SECS,
    DIRECTIONS,
    KEY_CLIENT_ID,
    KEY_FAN_DIRECTION,
    KEY_FAN_ON,
    KEY_FAN_SPEED,
    KEY_LIGHT_BRIGHTNESS,
    KEY_LIGHT_ON,
    MAX_POLL_SECS,
    OPTION_FAN_ENABLED,
    OPTION_LIGHT_ENABLED,
    OPTION_LOW_SPEED_VALUE,
    OPTION_POLL_SECS,
    OPTION_TURN_ON_WITH_SET_LEVEL,
    OPTION_TURN_ON_WITH_SET_SPEED,
)
from .exceptions import MalformedResponseError
from .speed import LOW_SPEED_VALUES


class EntityRole(StrEnum):
    """Facet of the appliance represented by a child entity."""

    FAN = "fan"
    LIGHT = "light"


def _require_bool(payload: Mapping[str, Any], key: str) -> bool:
    value = payload.get(key)
    if not isinstance(value, bool):
        raise MalformedResponseError(f"{key} missing or not a boolean: {value!r}")
    return value


def _require_int(payload: Mapping[str, Any], key: str, *, nullable: bool = False) -> int | None:
    if key not in payload:
        raise MalformedResponseError(f"{key} missing from response")
    value = payload[key]
    if value is None and nullable:
        return None
    # bool is an int subclass; the appliance never sends one for these keys
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedResponseError(f"{key} is not an integer: {value!r}")
    return value


@dataclass(frozen=True, slots=True)
class PhysicalState:
    """One snapshot of the appliance as reported by ``queryDynamicShadowData``."""

    light_on: bool
    light_brightness: int
    fan_on: bool
    fan_speed: int | None
    fan_direction: str
    client_id: str | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> PhysicalState:
        if not isinstance(payload, Mapping):
            raise MalformedResponseError(f"Expected a JSON object, got {type(payload).__name__}")
        brightness = _require_int(payload, KEY_LIGHT_BRIGHTNESS)
        assert brightness is not None
        direction = payload.get(KEY_FAN_DIRECTION)
        if direction not in DIRECTIONS:
            raise MalformedResponseError(f"{KEY_FAN_DIRECTION} is not valid: {direction!r}")
        client_id = payload.get(KEY_CLIENT_ID)
        return cls(
            light_on=_require_bool(payload, KEY_LIGHT_ON),
            light_brightness=brightness,
            fan_on=_require_bool(payload, KEY_FAN_ON),
            fan_speed=_require_int(payload, KEY_FAN_SPEED, nullable=True),
            fan_direction=direction,
            client_id=client_id if isinstance(client_id, str) and client_id else None,
        )

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class LogicalFanState:
    """Cached fan attributes as last delivered to Home Assistant."""

    switch: str | None = None
    speed: str | None = None
    last_running_speed: str | None = None
    direction: str | None = None


@dataclass(slots=True)
class LogicalLightState:
    """Cached light attributes as last delivered to Home Assistant."""

    switch: str | None = None
    level: int | None = None
    preset_level: int | None = None


@dataclass(frozen=True, slots=True)
class AttributeEvent:
    name: str
    value: Any
    description: str
    unit: str | None = None


FanDelta = tuple[AttributeEvent, ...]
LightDelta = tuple[AttributeEvent, ...]


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    return bool(value)


@dataclass(frozen=True, slots=True)
class EntityConfig:
    """Per-install entity settings, taken from the config entry options."""

    fan_enabled: bool = True
    light_enabled: bool = True
    low_speed_value: int = DEFAULT_LOW_SPEED_VALUE
    turn_on_with_set_speed: bool = True
    turn_on_with_set_level: bool = True
    polling_interval_seconds: int = DEFAULT_POLL_SECS

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> EntityConfig:
        try:
            low = int(options.get(OPTION_LOW_SPEED_VALUE, DEFAULT_LOW_SPEED_VALUE))
        except (TypeError, ValueError):
            low = DEFAULT_LOW_SPEED_VALUE
        if low not in LOW_SPEED_VALUES:
            low = max(LOW_SPEED_VALUES[0], min(LOW_SPEED_VALUES[-1], low))
        try:
            secs = int(options.get(OPTION_POLL_SECS, DEFAULT_POLL_SECS))
        except (TypeError, ValueError):
            secs = DEFAULT_POLL_SECS
        secs = max(0, min(MAX_POLL_SECS, secs))
        return cls(
            fan_enabled=_as_bool(options.get(OPTION_FAN_ENABLED), True),
            light_enabled=_as_bool(options.get(OPTION_LIGHT_ENABLED), True),
            low_speed_value=low,
            turn_on_with_set_speed=_as_bool(options.get(OPTION_TURN_ON_WITH_SET_SPEED), True),
            turn_on_with_set_level=_as_bool(options.get(OPTION_TURN_ON_WITH_SET_LEVEL), True),
            polling_interval_seconds=secs,
        )

    def is_enabled(self, role: EntityRole) -> bool:
        if role == EntityRole.FAN:
            return self.fan_enabled
        if role == EntityRole.LIGHT:
            return self.light_enabled
        return False
