"""Global constants."""


class OAuth2ResponseType:
    """OAuth2 response types accepted at the authorization endpoint."""

    CODE = "code"


class OAuth2GrantType:
    """OAuth2 grant types."""

    AUTHORIZATION_CODE = "authorization_code"


APPROVAL_VALUES: tuple[str, ...] = ("1", "true", "yes", "on", "allow")
