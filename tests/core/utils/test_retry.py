import pytest

import core.utils.retry as retry


@pytest.fixture
def no_sleep(monkeypatch):
    delays = []

    async def fake_sleep(delay):
        delays.append(delay)

    monkeypatch.setattr(retry.asyncio, "sleep", fake_sleep)
    return delays


@pytest.mark.asyncio
async def test_retries_until_success(no_sleep):
    attempts = []

    @retry.with_retries(max_attempts=3, base_delay=0.1, jitter=0, retry_on=(OSError,))
    async def flaky():
        attempts.append(1)
        if len(attempts) < 3:
            raise OSError("transient")
        return "ok"

    assert await flaky() == "ok"
    assert len(attempts) == 3
    assert no_sleep == [0.1, 0.2]


@pytest.mark.asyncio
async def test_reraises_after_max_attempts(no_sleep):
    attempts = []

    @retry.with_retries(max_attempts=2, base_delay=0.1, retry_on=(OSError,))
    async def always_fails():
        attempts.append(1)
        raise OSError("down")

    with pytest.raises(OSError):
        await always_fails()
    assert len(attempts) == 2
    assert len(no_sleep) == 1


@pytest.mark.asyncio
async def test_does_not_retry_other_exceptions(no_sleep):
    attempts = []

    @retry.with_retries(max_attempts=3, retry_on=(OSError,))
    async def bug():
        attempts.append(1)
        raise ValueError("bug")

    with pytest.raises(ValueError):
        await bug()
    assert len(attempts) == 1
    assert no_sleep == []


@pytest.mark.asyncio
async def test_should_retry_can_veto(no_sleep):
    attempts = []

    @retry.with_retries(
        max_attempts=3,
        retry_on=(OSError,),
        should_retry=lambda exc: "transient" in str(exc),
    )
    async def permanent():
        attempts.append(1)
        raise OSError("permanent")

    with pytest.raises(OSError):
        await permanent()
    assert len(attempts) == 1
