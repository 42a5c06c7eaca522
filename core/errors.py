"""OAuth2 errors raised by the grant engine.

authlib ships the RFC 6749 error catalogue but no ``server_error`` and no
403 variant of ``access_denied``; both live here.
"""

from authlib.oauth2.rfc6749.errors import AccessDeniedError, OAuth2Error


class ServerError(OAuth2Error):
    """A collaborator (model, generator, approval check) failed."""

    error = "server_error"
    description = "The authorization server encountered an unexpected condition"
    status_code = 500


class UserDeniedError(AccessDeniedError):
    """The resource owner declined the authorization request."""

    description = "The user denied access to your application"
    status_code = 403
