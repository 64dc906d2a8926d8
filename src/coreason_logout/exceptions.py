# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_identity

"""
Custom exceptions for the coreason-logout package.
"""


class CoreasonLogoutError(Exception):
    """Base exception for all coreason-logout errors."""


class NullFieldError(CoreasonLogoutError):
    """Raised when a required argument or field is absent (None)."""


class InvalidArgumentError(CoreasonLogoutError):
    """
    Raised when a required argument is present but semantically invalid
    (e.g. an empty client id), or when a required top-level JSON key is absent.
    """


class JsonFormatError(CoreasonLogoutError):
    """
    Raised when JSON text cannot be parsed or a value has the wrong shape.

    Attributes:
        key (str | None): The offending JSON key, or None when the text itself is not valid JSON.
    """

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key
