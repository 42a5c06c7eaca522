"""Client lookup for the authorization grant."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.models import Client
from authorize.oauth.context import GrantClient


class ClientRepository:
    """Reads registered clients as the grant sees them."""

    def __init__(self, db: AsyncSession):
        """Constructor."""
        self.db = db

    async def get_grant_client(self, client_id: str) -> GrantClient | None:
        """Return the client's id and registered redirect URI(s), if registered."""
        stmt = select(Client.client_id, Client.redirect_uri).where(
            Client.client_id == client_id
        )
        row = (await self.db.execute(stmt)).one_or_none()
        if row is None:
            return None
        return GrantClient(client_id=row.client_id, redirect_uri=row.redirect_uri)
