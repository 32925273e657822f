# eazycontroller
# Copyright (C) 2026 eazycontroller contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Exception hierarchy for eazycontroller.

Provider errors travel back to clients as ``{"type": "error"}`` envelopes.
Transport and monitor-loop failures are never raised past their task; they
are logged where they happen.
"""


class EazyControllerError(Exception):
    """Base exception for all controller errors."""


class ProviderError(EazyControllerError):
    """Raised when the host state provider fails or refuses a request."""


class UnsupportedPlatformError(ProviderError):
    """Raised when the provider has no implementation for this host."""


class SessionNotFoundError(ProviderError):
    """Raised when a named audio session or media session does not exist."""

    def __init__(self, name: str):
        super().__init__(f"Session not found: '{name}'")
        self.name = name


class DeviceNotFoundError(ProviderError):
    """Raised when an audio output device id does not exist."""

    def __init__(self, device_id: str):
        super().__init__(f"Device not found: '{device_id}'")
        self.device_id = device_id


class ProtocolError(EazyControllerError):
    """Raised when a client message cannot be decoded."""
