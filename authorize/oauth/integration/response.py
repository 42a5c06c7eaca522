"""Response channel that records the grant's redirect for Starlette."""

from starlette.responses import RedirectResponse


class RedirectChannel:
    """Collects the single redirect a grant emits."""

    def __init__(self, *, redirect_errors: bool = True) -> None:
        """Constructor."""
        self.redirect_errors = redirect_errors
        self.location: str | None = None

    @property
    def sent(self) -> bool:
        """True once a redirect has been emitted."""
        return self.location is not None

    def redirect(self, url: str) -> None:
        """Record ``url`` as the response location."""
        if self.sent:
            raise RuntimeError("response already sent")
        self.location = url

    def to_response(self) -> RedirectResponse:
        """Render the recorded redirect as a 302."""
        if self.location is None:
            raise RuntimeError("no redirect was emitted")
        return RedirectResponse(self.location, status_code=302)
