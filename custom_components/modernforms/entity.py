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

import logging
from typing import Any

from homeassistant.helpers.entity import DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .coordinator import ModernFormsCoordinator
from .lifecycle import child_unique_id
from .models import EntityRole, FanDelta, LightDelta

_LOGGER = logging.getLogger(__name__)


class ModernFormsChildEntity(CoordinatorEntity[ModernFormsCoordinator]):
    """Fan or light facet of the appliance with its cached attribute values.

    The cache is written only by ``apply_delta`` while the coordinator is
    reconciling; properties read from it. Subclasses set ``role`` and supply
    ``_reconcile_initial`` (the delta that seeds the cache from the current
    snapshot) and ``_fold`` (the delta applied to the cache).
    """

    role: EntityRole
    _attr_has_entity_name = True

    def __init__(self, coordinator: ModernFormsCoordinator, parent_id: str, device_info: DeviceInfo):
        super().__init__(coordinator)
        self._parent_id = parent_id
        self._attr_unique_id = child_unique_id(parent_id, self.role)
        self._attr_device_info = device_info
        self._attr_name = None
        self.logical_state: Any = None

    def _reconcile_initial(self) -> FanDelta | LightDelta:
        raise NotImplementedError

    async def async_added_to_hass(self) -> None:
        await super().async_added_to_hass()
        # Seed the cache from the last snapshot so a child created between
        # polls does not start out unknown
        if self.coordinator.data is not None:
            self.apply_delta(self._reconcile_initial(), write_state=False)

    def _fold(self, delta: Any) -> Any:
        raise NotImplementedError

    def apply_delta(self, delta: FanDelta | LightDelta, *, write_state: bool = True) -> None:
        for event in delta:
            if _LOGGER.isEnabledFor(logging.DEBUG):
                _LOGGER.debug(
                    "event d=%s %s=%s%s (%s)",
                    self.entity_id or self._attr_unique_id,
                    event.name,
                    event.value,
                    event.unit or "",
                    event.description,
                )
        self.logical_state = self._fold(delta)
        if write_state and self.hass is not None and self.entity_id:
            self.async_write_ha_state()

    async def async_update(self) -> None:
        await self.coordinator.async_refresh_state()
