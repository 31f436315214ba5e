"""
Shared route dependencies: bearer authentication and service lookup.
"""
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.container import Container
from app.core.errors import UnauthorizedError
from app.core.security import decode_access_token
from app.services.finance_service import FinanceService
from app.services.services_service import ServicesService
from app.services.trip_service import TripService

bearer_scheme = HTTPBearer(auto_error=False)


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    container: Container = Depends(get_container),
) -> dict:
    """Return the token claims of the caller."""
    if credentials is None:
        raise UnauthorizedError("Missing bearer token")

    payload = decode_access_token(credentials.credentials, container.settings)
    if payload is None:
        raise UnauthorizedError("Invalid or expired token")
    return payload


def get_trip_service(container: Container = Depends(get_container)) -> TripService:
    return container.trip_service


def get_services_service(container: Container = Depends(get_container)) -> ServicesService:
    return container.services_service


def get_finance_service(container: Container = Depends(get_container)) -> FinanceService:
    return container.finance_service
