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

"""Config entry setup, option changes and unload.

Option changes must take effect without a reload: disabling a child removes
its entity and registry entry, re-enabling brings it back, and the poll
interval and HTTP timeout follow the new values.
"""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import AsyncMock

from homeassistant.config_entries import ConfigEntryState
from homeassistant.core import HomeAssistant
from homeassistant.helpers import device_registry as dr
from homeassistant.helpers import entity_registry as er
from homeassistant.util import dt as dt_util
from pytest_homeassistant_custom_component.common import MockConfigEntry, async_fire_time_changed

from custom_components.modernforms.exceptions import TransportError

DOMAIN = "modernforms"


def _entry(**kwargs) -> MockConfigEntry:
    return MockConfigEntry(
        domain=DOMAIN,
        title="Modern Forms",
        data={"host": "192.0.2.10"},
        unique_id="MF_0123456789AB",
        **kwargs,
    )


async def test_setup_creates_device_and_entities(hass: HomeAssistant, patch_client):
    entry = _entry()
    entry.add_to_hass(hass)
    assert await hass.config_entries.async_setup(entry.entry_id)
    await hass.async_block_till_done()

    assert entry.state is ConfigEntryState.LOADED
    assert hass.states.get("fan.modern_forms") is not None
    assert hass.states.get("light.modern_forms") is not None
    assert hass.states.get("button.modern_forms_reboot") is not None

    registry = er.async_get(hass)
    assert (
        registry.async_get_entity_id("fan", DOMAIN, "modernforms_MF_0123456789AB_fan")
        == "fan.modern_forms"
    )

    device = dr.async_get(hass).async_get_device(identifiers={(DOMAIN, "MF_0123456789AB")})
    assert device is not None
    assert device.manufacturer == "Modern Forms"
    assert (dr.CONNECTION_NETWORK_MAC, "01:23:45:67:89:ab") in device.connections


async def test_setup_retries_when_fan_unreachable(hass: HomeAssistant, patch_client):
    patch_client.async_fetch_state = AsyncMock(side_effect=TransportError("refused"))
    entry = _entry()
    entry.add_to_hass(hass)
    await hass.config_entries.async_setup(entry.entry_id)
    await hass.async_block_till_done()

    assert entry.state is ConfigEntryState.SETUP_RETRY
    await hass.config_entries.async_unload(entry.entry_id)


async def test_disabled_children_are_not_created(hass: HomeAssistant, patch_client):
    entry = _entry(options={"light_enabled": False})
    entry.add_to_hass(hass)
    await hass.config_entries.async_setup(entry.entry_id)
    await hass.async_block_till_done()

    assert hass.states.get("fan.modern_forms") is not None
    assert hass.states.get("light.modern_forms") is None


async def test_options_toggle_deletes_and_recreates_child(hass: HomeAssistant, patch_client):
    entry = _entry()
    entry.add_to_hass(hass)
    await hass.config_entries.async_setup(entry.entry_id)
    await hass.async_block_till_done()
    registry = er.async_get(hass)

    hass.config_entries.async_update_entry(entry, options={"light_enabled": False})
    await hass.async_block_till_done()

    assert hass.states.get("light.modern_forms") is None
    assert registry.async_get_entity_id("light", DOMAIN, "modernforms_MF_0123456789AB_light") is None
    assert hass.states.get("fan.modern_forms") is not None

    hass.config_entries.async_update_entry(entry, options={"light_enabled": True})
    await hass.async_block_till_done()

    state = hass.states.get("light.modern_forms")
    assert state is not None
    assert state.state == "on"


async def test_options_update_interval_and_timeout(hass: HomeAssistant, patch_client):
    entry = _entry()
    entry.add_to_hass(hass)
    await hass.config_entries.async_setup(entry.entry_id)
    await hass.async_block_till_done()
    coordinator = entry.runtime_data["coordinator"]
    assert coordinator.update_interval == timedelta(seconds=30)

    hass.config_entries.async_update_entry(
        entry, options={"polling_interval_seconds": 0, "http_timeout_seconds": 20}
    )
    await hass.async_block_till_done()

    assert coordinator.update_interval is None
    assert patch_client.timeout_s == 20.0


def _count_fetches(client) -> list[int]:
    calls = [0]
    fetch = client.async_fetch_state

    async def _counting_fetch():
        calls[0] += 1
        return await fetch()

    client.async_fetch_state = _counting_fetch
    return calls


async def _advance(hass: HomeAssistant, seconds: int, step: int = 31) -> None:
    start = dt_util.utcnow()
    for elapsed in range(step, seconds + 1, step):
        async_fire_time_changed(hass, start + timedelta(seconds=elapsed))
        await hass.async_block_till_done()


async def test_enabling_polling_starts_timer(hass: HomeAssistant, patch_client):
    entry = _entry(options={"polling_interval_seconds": 0})
    entry.add_to_hass(hass)
    await hass.config_entries.async_setup(entry.entry_id)
    await hass.async_block_till_done()
    calls = _count_fetches(patch_client)

    hass.config_entries.async_update_entry(entry, options={"polling_interval_seconds": 30})
    await hass.async_block_till_done()
    await _advance(hass, 124)

    assert calls[0] >= 3


async def test_disabling_polling_stops_timer(hass: HomeAssistant, patch_client):
    entry = _entry(options={"polling_interval_seconds": 30})
    entry.add_to_hass(hass)
    await hass.config_entries.async_setup(entry.entry_id)
    await hass.async_block_till_done()
    calls = _count_fetches(patch_client)

    hass.config_entries.async_update_entry(entry, options={"polling_interval_seconds": 0})
    await hass.async_block_till_done()
    await _advance(hass, 124)

    assert calls[0] == 0


async def test_unload_entry(hass: HomeAssistant, patch_client):
    entry = _entry()
    entry.add_to_hass(hass)
    await hass.config_entries.async_setup(entry.entry_id)
    await hass.async_block_till_done()

    assert await hass.config_entries.async_unload(entry.entry_id)
    await hass.async_block_till_done()
    assert entry.state is ConfigEntryState.NOT_LOADED


async def test_reboot_button(hass: HomeAssistant, patch_client):
    entry = _entry()
    entry.add_to_hass(hass)
    await hass.config_entries.async_setup(entry.entry_id)
    await hass.async_block_till_done()

    await hass.services.async_call(
        "button", "press", {"entity_id": "button.modern_forms_reboot"}, blocking=True
    )

    assert patch_client.reboots == 1
