"""
Request-scoped dependencies shared by the routers.
"""
import uuid
from typing import Optional

from fastapi import Depends, Request

from dashboard.config import settings
from dashboard.services.state_store import InMemoryStateStore, WizardStateStore
from dashboard.storage import prune_idle_sessions, session_values


def resolve_session_id(request: Request) -> tuple[str, bool]:
    """
    Wizard session id for a request, and whether it was just minted.

    A per-tab id sent in the session header wins over the cookie.
    """
    session_id = request.headers.get(settings.session_header_name) or request.cookies.get(settings.session_cookie_name)
    if session_id:
        return session_id, False
    return uuid.uuid4().hex, True


def get_session_id(request: Request) -> str:
    return request.state.wizard_session_id


def get_state_store(session_id: str = Depends(get_session_id)) -> WizardStateStore:
    prune_idle_sessions(settings.session_idle_minutes * 60)
    return InMemoryStateStore(session_values(session_id))


def get_institution_id(request: Request) -> Optional[str]:
    return request.headers.get("X-Institution-Id") or settings.institution_id
