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

"""Translation between appliance fan speeds (0-6) and logical speed names.

The appliance has six running speeds while Home Assistant is given five, so
physical 1 and 2 both read back as "low". Which of the two is written for
"low" is a per-install option.
"""

from __future__ import annotations

import logging

from homeassistant.util.percentage import (
    ordered_list_item_to_percentage,
    percentage_to_ordered_list_item,
)

from .exceptions import InvalidSpeedError

_LOGGER = logging.getLogger(__name__)

SPEED_OFF = "off"
SPEED_ON = "on"
SPEED_LOW = "low"
SPEED_MEDIUM_LOW = "medium-low"
SPEED_MEDIUM = "medium"
SPEED_MEDIUM_HIGH = "medium-high"
SPEED_HIGH = "high"

# Running speeds, slowest first
LOGICAL_SPEEDS = [SPEED_LOW, SPEED_MEDIUM_LOW, SPEED_MEDIUM, SPEED_MEDIUM_HIGH, SPEED_HIGH]
LOW_SPEED_VALUES = (1, 2)

_DECODE: dict[int, str] = {
    0: SPEED_OFF,
    1: SPEED_LOW,
    2: SPEED_LOW,
    3: SPEED_MEDIUM_LOW,
    4: SPEED_MEDIUM,
    5: SPEED_MEDIUM_HIGH,
    6: SPEED_HIGH,
}

_ENCODE: dict[str, int] = {
    SPEED_OFF: 0,
    SPEED_MEDIUM_LOW: 3,
    SPEED_MEDIUM: 4,
    SPEED_MEDIUM_HIGH: 5,
    SPEED_HIGH: 6,
}

_CYCLE: dict[str, int] = {
    SPEED_LOW: 3,
    SPEED_MEDIUM_LOW: 4,
    SPEED_MEDIUM: 5,
    SPEED_MEDIUM_HIGH: 6,
}


def decode_speed(physical: int | None) -> str:
    """Return the logical name for a physical speed or raise InvalidSpeedError."""
    if physical is None:
        return SPEED_OFF
    if isinstance(physical, bool) or not isinstance(physical, int) or physical not in _DECODE:
        raise InvalidSpeedError(f"Unable to enumerate fan speed of {physical!r}")
    return _DECODE[physical]


def encode_speed(logical: str, low_value: int) -> int:
    """Return the physical value for a logical speed or raise InvalidSpeedError."""
    if logical == SPEED_LOW:
        return low_value
    try:
        return _ENCODE[logical]
    except (KeyError, TypeError) as exc:
        raise InvalidSpeedError(f"Unable to convert fan speed of {logical!r} to number") from exc


def to_logical(physical: int | None) -> str | None:
    """Decode a physical speed; unknown values are logged and read as None."""
    try:
        return decode_speed(physical)
    except InvalidSpeedError as exc:
        _LOGGER.error("%s", exc)
        return None


def to_physical(logical: str, low_value: int) -> int:
    """Encode a logical speed; unknown names fall back to the low speed value."""
    try:
        return encode_speed(logical, low_value)
    except InvalidSpeedError as exc:
        _LOGGER.error("%s, using %d", exc, low_value)
        return low_value


def next_cycle(current: str, low_value: int) -> int:
    """Physical speed following ``current`` when cycling; high wraps to low."""
    if current == SPEED_HIGH:
        return low_value
    try:
        return _CYCLE[current]
    except (KeyError, TypeError) as exc:
        raise InvalidSpeedError(f"No current speed to cycle from ({current!r})") from exc


def speed_to_percentage(logical: str | None) -> int | None:
    if logical is None:
        return None
    if logical == SPEED_OFF:
        return 0
    return ordered_list_item_to_percentage(LOGICAL_SPEEDS, logical)


def percentage_to_speed(percentage: int) -> str:
    if percentage <= 0:
        return SPEED_OFF
    return percentage_to_ordered_list_item(LOGICAL_SPEEDS, min(100, int(percentage)))
