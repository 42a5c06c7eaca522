import pytest
from authlib.oauth2.rfc6749 import OAuth2Request

from authorize.oauth.context import GrantContext, GrantStage


def make_context() -> GrantContext:
    return GrantContext(request=OAuth2Request("GET", "https://auth.example/authorize"))


def test_request_becomes_authenticated_once_client_verified():
    ctx = make_context()
    assert ctx.is_request_authenticated is False

    ctx.advance(GrantStage.PARAMS_VALID)
    assert ctx.is_request_authenticated is False

    ctx.advance(GrantStage.CLIENT_VERIFIED)
    assert ctx.is_request_authenticated is True

    ctx.advance(GrantStage.USER_APPROVED)
    assert ctx.is_request_authenticated is True


def test_advance_rejects_skipping_a_stage():
    ctx = make_context()
    with pytest.raises(RuntimeError):
        ctx.advance(GrantStage.CLIENT_VERIFIED)
    assert ctx.stage is GrantStage.START


def test_advance_rejects_going_back():
    ctx = make_context()
    ctx.advance(GrantStage.PARAMS_VALID)
    ctx.advance(GrantStage.CLIENT_VERIFIED)
    with pytest.raises(RuntimeError):
        ctx.advance(GrantStage.PARAMS_VALID)
    assert ctx.stage is GrantStage.CLIENT_VERIFIED
