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

"""Keep exactly the enabled child entities (fan, light) alive."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol

from homeassistant.core import HomeAssistant
from homeassistant.helpers import entity_registry as er
from homeassistant.helpers.entity import Entity
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN
from .exceptions import UnknownChildEntityError
from .models import EntityConfig, EntityRole

_LOGGER = logging.getLogger(__name__)


def child_unique_id(parent_id: str, role: EntityRole) -> str:
    return f"{DOMAIN}_{parent_id}_{role}"


class ChildEntityHost(Protocol):
    """Create, find and delete child entities on the host platform."""

    def is_ready(self, role: EntityRole) -> bool: ...

    def get_child_entity(self, role: EntityRole) -> Any | None: ...

    async def async_create_child_entity(self, role: EntityRole) -> Any: ...

    async def async_delete_child_entity(self, role: EntityRole) -> bool:
        """Delete the child for ``role``; return False when there was none."""
        ...


class HassChildEntityHost:
    """Child entities backed by Home Assistant entity platforms.

    Each platform registers its ``AddEntitiesCallback`` together with a
    factory for its role during ``async_setup_entry``. Deletion goes through
    the entity registry so that a registry entry left over from an earlier
    run is purged as well.
    """

    def __init__(self, hass: HomeAssistant, parent_id: str) -> None:
        self.hass = hass
        self.parent_id = parent_id
        self._adders: dict[EntityRole, AddEntitiesCallback] = {}
        self._factories: dict[EntityRole, Callable[[], Entity]] = {}
        self._entities: dict[EntityRole, Entity] = {}

    def register_platform(
        self,
        role: EntityRole,
        add_entities: AddEntitiesCallback,
        factory: Callable[[], Entity],
    ) -> None:
        self._adders[role] = add_entities
        self._factories[role] = factory

    def is_ready(self, role: EntityRole) -> bool:
        return role in self._adders

    def get_child_entity(self, role: EntityRole) -> Entity | None:
        return self._entities.get(role)

    async def async_create_child_entity(self, role: EntityRole) -> Entity:
        try:
            add_entities = self._adders[role]
            factory = self._factories[role]
        except KeyError as exc:
            raise UnknownChildEntityError(f"No platform registered for {role}") from exc
        entity = factory()
        add_entities([entity])
        self._entities[role] = entity
        return entity

    async def async_delete_child_entity(self, role: EntityRole) -> bool:
        entity = self._entities.pop(role, None)
        registry = er.async_get(self.hass)
        entity_id = registry.async_get_entity_id(
            str(role), DOMAIN, child_unique_id(self.parent_id, role)
        )
        if entity_id is not None:
            # Registry removal also removes the live entity from the state machine
            registry.async_remove(entity_id)
            return True
        if entity is not None and entity.hass is not None:
            await entity.async_remove()
            return True
        return entity is not None


class EntityLifecycleManager:
    def __init__(self, host: ChildEntityHost) -> None:
        self.host = host

    def entity(self, role: EntityRole | str) -> Any | None:
        return self.host.get_child_entity(self.require(role))

    @staticmethod
    def require(role: EntityRole | str) -> EntityRole:
        try:
            return EntityRole(role)
        except ValueError as exc:
            raise UnknownChildEntityError(f"Unknown child entity: {role!r}") from exc

    async def async_reconcile_entities(self, config: EntityConfig) -> None:
        """Create enabled and delete disabled children; repeat calls are no-ops."""
        for role in EntityRole:
            await self.async_reconcile_role(role, config)

    async def async_reconcile_role(self, role: EntityRole, config: EntityConfig) -> None:
        if not config.is_enabled(role):
            if await self.host.async_delete_child_entity(role):
                _LOGGER.info("Deleted %s child entity (disabled in options)", role)
            return

        if self.host.get_child_entity(role) is not None:
            return
        if not self.host.is_ready(role):
            if _LOGGER.isEnabledFor(logging.DEBUG):
                _LOGGER.debug("create deferred role=%s platform not loaded", role)
            return
        try:
            await self.host.async_create_child_entity(role)
        except Exception as exc:
            _LOGGER.warning("Could not create %s child entity: %s", role, exc)
            return
        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug("created child entity role=%s", role)
