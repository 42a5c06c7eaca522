import pytest
from authlib.oauth2.rfc6749.errors import InvalidRequestError

from authorize.oauth.pipeline import run_steps


def recording_step(name, calls, error=None):
    async def step(ctx):
        calls.append(name)
        ctx.append(name)
        if error is not None:
            raise error

    step.__name__ = name
    return step


@pytest.mark.asyncio
async def test_runs_all_steps_in_order_then_completes_without_error():
    calls: list[str] = []
    ctx: list[str] = []
    completed = []

    async def on_complete(error):
        completed.append(error)
        return "done"

    steps = [recording_step(n, calls) for n in ("a", "b", "c")]
    result = await run_steps(steps, ctx, on_complete)

    assert result == "done"
    assert calls == ["a", "b", "c"]
    assert ctx == ["a", "b", "c"]
    assert completed == [None]


@pytest.mark.asyncio
async def test_first_failure_skips_remaining_steps():
    calls: list[str] = []
    completed = []
    boom = InvalidRequestError(description="bad")
    later = InvalidRequestError(description="never raised")

    async def on_complete(error):
        completed.append(error)

    steps = [
        recording_step("a", calls),
        recording_step("b", calls, error=boom),
        recording_step("c", calls, error=later),
    ]
    await run_steps(steps, [], on_complete)

    assert calls == ["a", "b"]
    assert completed == [boom]


@pytest.mark.asyncio
async def test_non_oauth_exceptions_propagate_without_completion():
    completed = []

    async def on_complete(error):
        completed.append(error)

    steps = [recording_step("a", [], error=KeyError("bug"))]
    with pytest.raises(KeyError):
        await run_steps(steps, [], on_complete)

    assert completed == []
