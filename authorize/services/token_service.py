"""Authorization code generation."""

from core.security.utils import new_code
from authorize.config import settings
from authorize.oauth.context import GrantContext


class CodeGenerator:
    """Issues random URL-safe codes.

    When the model exposes ``generate_token(grant_type, context)`` its
    non-empty result is used instead of a random value.
    """

    def __init__(self, model=None, nbytes: int | None = None) -> None:
        """Constructor."""
        self.model = model
        self.nbytes = nbytes or settings.CODE_BYTES

    async def generate(self, grant_type: str, context: GrantContext) -> str:
        """Return a new code for ``grant_type``."""
        hook = getattr(self.model, "generate_token", None)
        if hook is not None:
            token = await hook(grant_type, context)
            if token:
                return token
        return new_code(self.nbytes)
