# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""Wire encoders for event batches (JSON text and Avro binary)."""

from __future__ import annotations

from eventpublisher.serialization.serializer_avro import (
    AvroBatchSerializer,
    metadata_from_avro,
    metadata_to_avro,
)
from eventpublisher.serialization.serializer_json import (
    decode_json_batch,
    encode_json_batch,
    event_from_json,
    event_to_json,
    payload_to_json,
)

__all__ = [
    "AvroBatchSerializer",
    "decode_json_batch",
    "encode_json_batch",
    "event_from_json",
    "event_to_json",
    "metadata_from_avro",
    "metadata_to_avro",
    "payload_to_json",
]
