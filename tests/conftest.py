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

"""Shared pytest fixtures for the Modern Forms custom component tests.

Provides an in-memory fan appliance standing in for the HTTP client and
automatic enabling of custom integrations so the tests can exercise setup
and service calls without network access.
"""

import pathlib
import sys
from unittest.mock import patch

import pytest

# Ensure project root is on sys.path for direct module imports in tests
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from custom_components.modernforms.metrics import ConnectionMetrics  # noqa: E402
from custom_components.modernforms.models import PhysicalState  # noqa: E402

CLIENT_ID = "MF_0123456789AB"


def default_status() -> dict:
    return {
        "clientId": CLIENT_ID,
        "lightOn": True,
        "lightBrightness": 50,
        "fanOn": True,
        "fanSpeed": 3,
        "fanDirection": "forward",
    }


class FakeFanClient:
    """Behaves like the appliance: every command merges into its state."""

    def __init__(self, host: str = "192.0.2.10"):
        self.host = host
        self.status = default_status()
        self.sent: list[dict] = []
        self.reboots = 0
        self.timeout_s = 10.0
        self.metrics = ConnectionMetrics()

    async def async_send_command(self, body, *, timeout_s=None):
        self.sent.append(dict(body))
        for key, value in body.items():
            if key in self.status:
                self.status[key] = value
        return dict(self.status)

    async def async_fetch_state(self):
        return PhysicalState.from_payload(dict(self.status))

    async def async_reboot(self):
        self.reboots += 1

    def apply_timeout(self, timeout_s):
        if timeout_s is not None:
            self.timeout_s = float(timeout_s)

    def get_diagnostics_data(self):
        return {"host": self.host, "timeout_seconds": self.timeout_s}


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations):
    yield


@pytest.fixture
def mock_client():
    return FakeFanClient()


@pytest.fixture
def patch_client(mock_client):
    instance = mock_client
    # Patch where the class is referenced to avoid real network calls
    with (
        patch("custom_components.modernforms.ModernFormsClient", return_value=instance),
        patch(
            "custom_components.modernforms.config_flow.ModernFormsClient",
            return_value=instance,
        ),
    ):
        yield instance
