"""FastAPI dependencies"""

from typing import Annotated

from fastapi import Depends
from fastapi.requests import HTTPConnection

from wagate.core.exceptions import NotConnectedError
from wagate.services.context import GatewayContext
from wagate.whatsapp.base import Session


def get_gateway(connection: HTTPConnection) -> GatewayContext:
    """Gateway context attached to the app at startup."""
    return connection.app.state.gateway


def get_connected_session(
    gateway: Annotated[GatewayContext, Depends(get_gateway)],
) -> Session:
    session = gateway.connection.connected_session()
    if session is None:
        raise NotConnectedError()
    return session


# Type aliases for dependencies
Gateway = Annotated[GatewayContext, Depends(get_gateway)]
ConnectedSession = Annotated[Session, Depends(get_connected_session)]
