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

DOMAIN = "modernforms"
PLATFORMS = ["fan", "light", "button"]
CONF_HOST = "host"
CONF_HTTP_TIMEOUT = "http_timeout_seconds"

# Options (per-install entity settings)
OPTION_FAN_ENABLED = "fan_enabled"
OPTION_LIGHT_ENABLED = "light_enabled"
OPTION_LOW_SPEED_VALUE = "low_speed_value"
OPTION_TURN_ON_WITH_SET_SPEED = "turn_on_with_set_speed"
OPTION_TURN_ON_WITH_SET_LEVEL = "turn_on_with_set_level"
OPTION_POLL_SECS = "polling_interval_seconds"

DEFAULT_LOW_SPEED_VALUE = 2
DEFAULT_POLL_SECS = 30
MIN_POLL_SECS = 5
MAX_POLL_SECS = 3600
DEFAULT_HTTP_TIMEOUT_SECS = 10
MIN_HTTP_TIMEOUT_SECS = 1
MAX_HTTP_TIMEOUT_SECS = 60
REBOOT_TIMEOUT_SECS = 1.0
SLOW_RESPONSE_WARNING_MS = 5000

# Appliance endpoint and protocol keys
API_PATH = "/mf"
KEY_QUERY = "queryDynamicShadowData"
KEY_CLIENT_ID = "clientId"
KEY_LIGHT_ON = "lightOn"
KEY_LIGHT_BRIGHTNESS = "lightBrightness"
KEY_FAN_ON = "fanOn"
KEY_FAN_SPEED = "fanSpeed"
KEY_FAN_DIRECTION = "fanDirection"
KEY_REBOOT = "reboot"

DIRECTION_FORWARD = "forward"
DIRECTION_REVERSE = "reverse"
DIRECTIONS = (DIRECTION_FORWARD, DIRECTION_REVERSE)

# Child entity attribute names
ATTR_SWITCH = "switch"
ATTR_SPEED = "speed"
ATTR_LAST_RUNNING_SPEED = "last_running_speed"
ATTR_DIRECTION = "direction"
ATTR_LEVEL = "level"
ATTR_PRESET_LEVEL = "preset_level"
ATTR_SUPPORTED_SPEEDS = "supported_speeds"

SERVICE_CYCLE_SPEED = "cycle_speed"
SERVICE_CHANGE_DIRECTION = "change_direction"
SERVICE_SET_LEVEL = "set_level"


def clamp_level(value: int) -> int:
    """Clamp a light level to the appliance range [0, 100]."""
    return max(0, min(100, int(value)))


def ha_brightness_to_level(brightness: int | None) -> int | None:
    """Map Home Assistant brightness (0-255) to appliance 0-100."""
    if brightness is None:
        return None
    level = clamp_level(round(int(brightness) * 100 / 255))
    # Any nonzero brightness stays on
    return max(1, level) if brightness > 0 else 0


def level_to_ha_brightness(level: int) -> int:
    """Map appliance 0-100 to Home Assistant brightness (0-255)."""
    return round(clamp_level(level) * 255 / 100)
