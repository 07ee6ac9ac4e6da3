from __future__ import annotations

import time
import uuid

import pytest
from fastapi import HTTPException

from hoteldb.security import SYSTEM_USER_ID, get_acting_user_id, resolve_actor
from hoteldb.utils.identifiers import generate_uuid7, uuid7_timestamp_ms


def test_uuid7_has_version_and_variant():
    value = uuid.UUID(generate_uuid7())
    assert value.version == 7
    assert value.variant == uuid.RFC_4122


def test_uuid7_embeds_creation_time():
    before = int(time.time() * 1000)
    value = generate_uuid7()
    after = int(time.time() * 1000)
    assert before <= uuid7_timestamp_ms(value) <= after


def test_uuid7_values_are_unique():
    values = {generate_uuid7() for _ in range(500)}
    assert len(values) == 500


def test_resolve_actor_defaults_to_system():
    assert resolve_actor(None) == SYSTEM_USER_ID
    assert resolve_actor("   ") == SYSTEM_USER_ID
    assert resolve_actor(" housekeeping-1 ") == "housekeeping-1"


def test_acting_user_header_dependency():
    assert get_acting_user_id("frontdesk") == "frontdesk"
    assert get_acting_user_id(None) == "system"


def test_acting_user_header_rejects_oversized_ids():
    assert get_acting_user_id("u" * 64) == "u" * 64
    with pytest.raises(HTTPException) as exc:
        get_acting_user_id("u" * 65)
    assert exc.value.status_code == 422
