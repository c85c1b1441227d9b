"""Request dependencies resolving the services owned by the running application."""

from __future__ import annotations

from fastapi import Request

from moviecore.core.container import ServiceContainer


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container
