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

import pytest

from custom_components.modernforms.exceptions import MalformedResponseError
from custom_components.modernforms.models import EntityConfig, EntityRole, PhysicalState


def _payload(**overrides):
    data = {
        "clientId": "MF_0123456789AB",
        "lightOn": False,
        "lightBrightness": 75,
        "fanOn": True,
        "fanSpeed": 4,
        "fanDirection": "reverse",
    }
    data.update(overrides)
    return data


def test_from_payload_reads_all_fields():
    state = PhysicalState.from_payload(_payload())
    assert state == PhysicalState(
        light_on=False,
        light_brightness=75,
        fan_on=True,
        fan_speed=4,
        fan_direction="reverse",
        client_id="MF_0123456789AB",
    )


def test_from_payload_allows_null_speed_and_missing_client_id():
    payload = _payload(fanSpeed=None)
    del payload["clientId"]
    state = PhysicalState.from_payload(payload)
    assert state.fan_speed is None
    assert state.client_id is None


@pytest.mark.parametrize(
    "overrides",
    [
        {"lightOn": "true"},
        {"fanOn": 1},
        {"lightBrightness": "50"},
        {"lightBrightness": True},
        {"fanSpeed": 2.5},
        {"fanDirection": "sideways"},
    ],
)
def test_from_payload_rejects_bad_types(overrides):
    with pytest.raises(MalformedResponseError):
        PhysicalState.from_payload(_payload(**overrides))


@pytest.mark.parametrize("missing", ["lightOn", "lightBrightness", "fanOn", "fanSpeed"])
def test_from_payload_rejects_missing_keys(missing):
    payload = _payload()
    del payload[missing]
    with pytest.raises(MalformedResponseError):
        PhysicalState.from_payload(payload)


def test_from_payload_rejects_non_object():
    with pytest.raises(MalformedResponseError):
        PhysicalState.from_payload([1, 2, 3])


def test_entity_config_defaults():
    config = EntityConfig.from_options({})
    assert config == EntityConfig()
    assert config.low_speed_value == 2
    assert config.polling_interval_seconds == 30
    assert config.is_enabled(EntityRole.FAN)
    assert config.is_enabled(EntityRole.LIGHT)


def test_entity_config_clamps_values():
    config = EntityConfig.from_options(
        {"low_speed_value": 5, "polling_interval_seconds": 99999, "light_enabled": False}
    )
    assert config.low_speed_value == 2
    assert config.polling_interval_seconds == 3600
    assert not config.is_enabled("light")
    assert EntityConfig.from_options({"low_speed_value": 0}).low_speed_value == 1
    assert EntityConfig.from_options({"polling_interval_seconds": -4}).polling_interval_seconds == 0
