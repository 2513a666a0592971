import pytest

from relay_api.delivery import UserLockTable


def test_same_user_always_maps_to_same_lock():
    table = UserLockTable(8)
    assert table.lock_for("alice") is table.lock_for("alice")
    assert 0 <= table.shard_for("bob") < 8


def test_single_shard_serializes_everyone():
    table = UserLockTable(1)
    assert table.lock_for("alice") is table.lock_for("bob")


def test_shards_must_be_positive():
    with pytest.raises(ValueError):
        UserLockTable(0)
