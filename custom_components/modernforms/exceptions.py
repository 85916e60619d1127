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

"""Errors raised by the Modern Forms integration."""

from __future__ import annotations


class ModernFormsError(Exception):
    """Base class for Modern Forms errors."""


class TransportError(ModernFormsError):
    """Connection refused, DNS failure, non-2xx reply or other transport fault."""


class TransportTimeoutError(TransportError):
    """The appliance did not answer within the bounded wait."""


class MalformedResponseError(ModernFormsError):
    """Reply body is not JSON or lacks a required, correctly typed field."""


class InvalidSpeedError(ModernFormsError, ValueError):
    """Speed value outside the physical or logical vocabulary."""


class UnknownChildEntityError(ModernFormsError, KeyError):
    """Command routed to an entity role that is not recognized."""
