"""Per-request context registry for OAuth2Request objects."""

from types import SimpleNamespace
from typing import Any
from weakref import WeakKeyDictionary

_CTX: "WeakKeyDictionary[object, SimpleNamespace]" = WeakKeyDictionary()


def set_context(req: object, *, db: Any = None, subject: str | None = None) -> None:
    """Attach the request's DB session and authenticated subject via a weak map."""
    _CTX[req] = SimpleNamespace(db=db, subject=subject)


def get_context(req: object) -> SimpleNamespace:
    """Return previously attached context for the request (or empty)."""
    return _CTX.get(req, SimpleNamespace(db=None, subject=None))
