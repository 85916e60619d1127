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

"""Diagnostics support for Modern Forms."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from .device_utils import mac_from_client_id
from .models import EntityRole


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    runtime_data = entry.runtime_data
    client = runtime_data.get("client")
    coordinator = runtime_data.get("coordinator")

    diagnostics: dict[str, Any] = {
        "config_entry": {
            "entry_id": entry.entry_id,
            "title": entry.title,
            "version": entry.version,
            "options": dict(entry.options),
        },
        "home_assistant_version": getattr(hass.config, "version", "unknown"),
        "coordinator": {},
        "client": {},
        "entities": {},
        "connection_analysis": {},
    }

    if coordinator:
        diag = coordinator.get_diagnostics_data()
        physical = diag.get("physical_state")
        if physical and physical.get("client_id"):
            # Client id embeds the MAC address; keep the vendor prefix only
            physical["client_id"] = _mask_client_id(physical["client_id"])
        diagnostics["coordinator"] = diag
        for role in EntityRole:
            entity = coordinator.lifecycle.entity(role)
            diagnostics["entities"][str(role)] = {
                "present": entity is not None,
                "entity_id": getattr(entity, "entity_id", None),
                "logical_state": _as_dict(getattr(entity, "logical_state", None)),
            }

    if client:
        diagnostics["client"] = client.get_diagnostics_data()
        diagnostics["connection_analysis"] = _analyze_connection_quality(client.metrics)

    return diagnostics


def _mask_client_id(client_id: str) -> str:
    mac = mac_from_client_id(client_id)
    if mac is None:
        return "**REDACTED**"
    return ":".join(mac.split(":")[:3] + ["XX", "XX", "XX"])


def _as_dict(state: Any) -> dict[str, Any] | None:
    if state is None:
        return None
    return asdict(state)


def _analyze_connection_quality(metrics: Any) -> dict[str, Any]:
    """Summarize request metrics into a quality rating."""
    analysis: dict[str, Any] = {
        "quality": "unknown",
        "issues": [],
    }

    if metrics.total_commands == 0:
        analysis["quality"] = "no_data"
        analysis["issues"].append("No requests have been sent yet")
        return analysis

    success_rate = 1.0 - metrics.failure_rate
    avg_latency = metrics.avg_latency_ms

    if success_rate >= 0.95 and avg_latency < 1000:
        analysis["quality"] = "excellent"
    elif success_rate >= 0.90 and avg_latency < 2000:
        analysis["quality"] = "good"
    elif success_rate >= 0.75 and avg_latency < 5000:
        analysis["quality"] = "fair"
    else:
        analysis["quality"] = "poor"

    if success_rate < 0.90:
        analysis["issues"].append(
            f"Low success rate: {success_rate:.1%} "
            f"({metrics.failed_commands}/{metrics.total_commands} failures)"
        )
    if metrics.timed_out_commands:
        analysis["issues"].append(f"{metrics.timed_out_commands} requests timed out")
    if metrics.malformed_responses:
        analysis["issues"].append(f"{metrics.malformed_responses} malformed responses")

    return analysis
