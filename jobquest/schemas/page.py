"""
Pydantic schemas for page views: one JSON rendering per application URL.
"""
from datetime import date
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from jobquest.core.gating import GateStatus
from jobquest.schemas.auth import UserState


class NavLink(BaseModel):
    to: str
    label: str
    method: str = "GET"


class Footer(BaseModel):
    copyright: str = Field(default_factory=lambda: f"© {date.today().year} JobQuest. All rights reserved.")
    contact: str = "contact@jobquest.com"


class PageView(BaseModel):
    """
    What a page renders for the current user.

    ``status`` is the gate outcome; when it is not ``ok`` the page carries a
    placeholder ``message`` and no ``data``.
    """
    page: str
    status: GateStatus = GateStatus.OK
    message: Optional[str] = None
    user: Optional[UserState] = None
    nav: List[NavLink] = Field(default_factory=list)
    footer: Footer = Field(default_factory=Footer)
    data: Optional[Dict[str, Any]] = None

    class Config:
        json_schema_extra = {
            "example": {
                "page": "applicants",
                "status": "access_denied",
                "message": "Access denied.",
                "user": None,
                "nav": [{"to": "/", "label": "Home", "method": "GET"}],
                "footer": {"copyright": "© 2026 JobQuest. All rights reserved.", "contact": "contact@jobquest.com"},
                "data": None
            }
        }
