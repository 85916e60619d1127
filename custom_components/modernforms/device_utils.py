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

from homeassistant.helpers.device_registry import CONNECTION_NETWORK_MAC
from homeassistant.helpers.entity import DeviceInfo

from .const import DOMAIN


def mac_from_client_id(client_id: str | None) -> str | None:
    """Derive the MAC address from a ``MF_XXXXXXXXXXXX`` client id."""
    if not isinstance(client_id, str) or not client_id.startswith("MF_"):
        return None
    raw = client_id[3:].lower()
    if len(raw) != 12 or any(c not in "0123456789abcdef" for c in raw):
        return None
    return ":".join(raw[i : i + 2] for i in range(0, 12, 2))


def create_device_info(parent_id: str, host: str, name: str, client_id: str | None) -> DeviceInfo:
    """Parent device shared by the fan, light and reboot button."""
    info = DeviceInfo(
        identifiers={(DOMAIN, parent_id)},
        manufacturer="Modern Forms",
        model="Smart Fan",
        name=name,
        configuration_url=f"http://{host}",
        serial_number=client_id,
    )
    mac = mac_from_client_id(client_id)
    if mac:
        info["connections"] = {(CONNECTION_NETWORK_MAC, mac)}
    return info
