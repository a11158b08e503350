"""FastAPI dependencies resolving services from the application container."""

from typing import Annotated

from fastapi import Depends, Request

from warden.domain.services.auth.auth_service import AuthService
from warden.domain.services.auth.token import TokenService
from warden.domain.services.email.mailer_service import MailerService
from warden.domain.services.users.user_service import UserService
from warden.infrastructure.dependency_injection.container import Container

__all__ = [
    "get_container",
    "ContainerDep",
    "AuthServiceDep",
    "UserServiceDep",
    "TokenServiceDep",
    "MailerDep",
]


def get_container(request: Request) -> Container:
    return request.app.state.container


ContainerDep = Annotated[Container, Depends(get_container)]


def _auth_service(container: ContainerDep) -> AuthService:
    return container.auth_service


def _user_service(container: ContainerDep) -> UserService:
    return container.user_service


def _token_service(container: ContainerDep) -> TokenService:
    return container.token_service


def _mailer(container: ContainerDep) -> MailerService:
    return container.mailer


AuthServiceDep = Annotated[AuthService, Depends(_auth_service)]
UserServiceDep = Annotated[UserService, Depends(_user_service)]
TokenServiceDep = Annotated[TokenService, Depends(_token_service)]
MailerDep = Annotated[MailerService, Depends(_mailer)]
