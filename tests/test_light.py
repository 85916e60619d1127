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

"""End-to-end light entity tests: on/off, brightness and preset restore."""

from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

DOMAIN = "modernforms"
LIGHT = "light.modern_forms"


async def _setup(hass: HomeAssistant, options: dict | None = None) -> MockConfigEntry:
    entry = MockConfigEntry(
        domain=DOMAIN,
        title="Modern Forms",
        data={"host": "192.0.2.10"},
        options=options or {},
        unique_id="MF_0123456789AB",
    )
    entry.add_to_hass(hass)
    await hass.config_entries.async_setup(entry.entry_id)
    await hass.async_block_till_done()
    return entry


async def test_light_entity_lifecycle(hass: HomeAssistant, patch_client):
    await _setup(hass)

    state = hass.states.get(LIGHT)
    assert state is not None
    assert state.state == "on"
    assert state.attributes.get("brightness") == 128
    assert state.attributes.get("preset_level") == 50

    await hass.services.async_call("light", "turn_off", {"entity_id": LIGHT}, blocking=True)
    await hass.async_block_till_done()
    assert hass.states.get(LIGHT).state == "off"
    assert patch_client.sent[-1] == {"lightOn": False}

    await hass.services.async_call(
        "light", "turn_on", {"entity_id": LIGHT, "brightness": 255}, blocking=True
    )
    await hass.async_block_till_done()
    state = hass.states.get(LIGHT)
    assert state.state == "on"
    assert state.attributes.get("brightness") == 255
    assert patch_client.sent[-1] == {"lightOn": True, "lightBrightness": 100}


async def test_turn_on_restores_preset_level(hass: HomeAssistant, patch_client):
    patch_client.status.update(lightOn=False, lightBrightness=35)
    await _setup(hass)

    await hass.services.async_call("light", "turn_on", {"entity_id": LIGHT}, blocking=True)
    await hass.async_block_till_done()

    assert patch_client.sent[-1] == {"lightOn": True, "lightBrightness": 35}
    assert hass.states.get(LIGHT).state == "on"


async def test_turn_on_with_brightness_switches_light_on(hass: HomeAssistant, patch_client):
    patch_client.status["lightOn"] = False
    await _setup(hass, {"turn_on_with_set_level": False})

    await hass.services.async_call(
        "light", "turn_on", {"entity_id": LIGHT, "brightness": 128}, blocking=True
    )
    await hass.async_block_till_done()

    assert patch_client.sent[-1] == {"lightOn": True, "lightBrightness": 50}
    assert hass.states.get(LIGHT).state == "on"


async def test_set_level_service_honors_turn_on_option(hass: HomeAssistant, patch_client):
    patch_client.status["lightOn"] = False
    await _setup(hass, {"turn_on_with_set_level": False})

    await hass.services.async_call(
        DOMAIN, "set_level", {"entity_id": LIGHT, "level": 20}, blocking=True
    )
    await hass.async_block_till_done()

    assert patch_client.sent[-1] == {"lightBrightness": 20}
    state = hass.states.get(LIGHT)
    assert state.state == "off"
    assert state.attributes.get("preset_level") == 20


async def test_light_unavailable_when_poll_fails(hass: HomeAssistant, patch_client):
    from unittest.mock import AsyncMock

    from custom_components.modernforms.exceptions import TransportError

    entry = await _setup(hass)
    patch_client.async_fetch_state = AsyncMock(side_effect=TransportError("down"))
    await entry.runtime_data["coordinator"].async_refresh()
    await hass.async_block_till_done()

    assert hass.states.get(LIGHT).state == "unavailable"


async def test_set_level_service_turns_light_on_by_default(hass: HomeAssistant, patch_client):
    patch_client.status["lightOn"] = False
    await _setup(hass)

    await hass.services.async_call(
        DOMAIN, "set_level", {"entity_id": LIGHT, "level": 70}, blocking=True
    )
    await hass.async_block_till_done()

    assert patch_client.sent[-1] == {"lightOn": True, "lightBrightness": 70}
    state = hass.states.get(LIGHT)
    assert state.state == "on"
    assert state.attributes.get("preset_level") == 70


def test_child_entities_supply_cache_hooks():
    from custom_components.modernforms.entity import ModernFormsChildEntity
    from custom_components.modernforms.fan import ModernFormsFan
    from custom_components.modernforms.light import ModernFormsLight

    for cls in (ModernFormsFan, ModernFormsLight):
        assert cls._fold is not ModernFormsChildEntity._fold
        assert cls._reconcile_initial is not ModernFormsChildEntity._reconcile_initial
