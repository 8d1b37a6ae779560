import pytest

from app.core.guard import OperationGuard
from app.utils.colors import FALLBACK_HSL, hex_to_hsl


@pytest.mark.parametrize("value, expected", [
    ("#ff0000", "0 100% 50%"),
    ("00ff00", "120 100% 50%"),
    ("#0000FF", "240 100% 50%"),
    ("#fff", "0 0% 100%"),
    ("000", "0 0% 0%"),
    ("#808080", "0 0% 50%"),
])
def test_hex_to_hsl(value, expected):
    assert hex_to_hsl(value) == expected


@pytest.mark.parametrize("value", ["", "#12", "#gggggg", "#12345", None])
def test_invalid_hex_falls_back(value):
    assert hex_to_hsl(value) == FALLBACK_HSL


def test_guard_refuses_busy_key_and_repeated_token():
    guard = OperationGuard("test")

    assert guard.try_begin("a", "t1")
    assert not guard.try_begin("a", "t2")
    assert guard.try_begin("b")
    guard.end("a")

    assert not guard.try_begin("a", "t1")
    assert guard.try_begin("a", "t2")


def test_guard_hold_releases_on_error():
    guard = OperationGuard("test")

    with pytest.raises(RuntimeError):
        with guard.hold("a") as acquired:
            assert acquired
            raise RuntimeError("boom")

    assert not guard.is_busy("a")


def test_guard_forgets_tokens_of_least_recent_keys():
    guard = OperationGuard("test", max_tokens=2)

    for key in ("a", "b", "c"):
        assert guard.try_begin(key, "t1")
        guard.end(key)

    assert guard.try_begin("a", "t1")
    guard.end("a")
    assert not guard.try_begin("c", "t1")
    assert len(guard._last_token) == 2
