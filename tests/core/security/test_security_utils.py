from datetime import datetime, timezone

from core.security.utils import compute_expiry, new_code


def test_compute_expiry_offsets_now():
    now = datetime(2025, 1, 1, tzinfo=timezone.utc)
    assert (compute_expiry(30, now) - now).total_seconds() == 30


def test_new_code_is_random_and_url_safe():
    first, second = new_code(32), new_code(32)
    assert first != second
    assert set(first) <= set(
        "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"
    )
