from fastapi import Depends, Request

from .container import ApplicationContainer


def get_container(request: Request) -> ApplicationContainer:
    container = getattr(request.app.state, "container", None)
    if not container:
        raise RuntimeError("Application container not initialised.")
    return container


def get_account_service(container: ApplicationContainer = Depends(get_container)):
    return container.account_service


def get_auth_guard(container: ApplicationContainer = Depends(get_container)):
    return container.auth_guard


def get_subscription_service(container: ApplicationContainer = Depends(get_container)):
    return container.subscription_service
