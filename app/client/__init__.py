from app.client.gateway import GatewayError, RemoteGateway
from app.client.entry_store import EntryStore

__all__ = ["GatewayError", "RemoteGateway", "EntryStore"]
