import uuid

from enmime.stringutil.randsource import new_locked_source
from enmime.stringutil.uuidgen import random_uuid


def _check_v4(value):
    parsed = uuid.UUID(value)
    assert len(value) == 36
    assert str(parsed) == value
    assert parsed.version == 4
    assert parsed.variant == uuid.RFC_4122


def test_random_uuids_differ():
    values = {random_uuid(None) for _ in range(50)}
    assert len(values) == 50


def test_uuid_format():
    _check_v4(random_uuid(None))


def test_seeded_source_is_deterministic():
    first = [random_uuid(new_locked_source(seed)) for seed in range(5)]
    second = [random_uuid(new_locked_source(seed)) for seed in range(5)]
    assert first == second
    assert len(set(first)) == 5


def test_seeded_source_format():
    for seed in range(20):
        _check_v4(random_uuid(new_locked_source(seed)))