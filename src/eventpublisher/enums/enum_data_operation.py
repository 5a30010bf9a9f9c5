# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""
Data operation enum for data change events.

The broker encodes the operation as a single-letter code under ``data_op``.
"""

from enum import Enum


class EnumDataOperation(str, Enum):
    """Operation applied to the external entity of a data change event."""

    CREATE = "C"
    UPDATE = "U"
    DELETE = "D"
    SNAPSHOT = "S"


__all__ = [
    "EnumDataOperation",
]
