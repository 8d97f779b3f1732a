"""Request identity wiring.

Authentication itself happens upstream; this module only turns whatever the
auth layer produced into a :class:`~domains.notifications.Recipient` stored on
``g.current_user``.
"""

from __future__ import annotations

from typing import Callable, Optional

from flask import Flask, Request, g, request

from domains.notifications import Recipient
from logging_lib.config import _bool_env


IdentityLoader = Callable[[Request], Optional[Recipient]]


def proxy_header_identity(req: Request) -> Optional[Recipient]:
    """Build a recipient from headers set by a trusted authenticating proxy."""

    user_id = (req.headers.get("X-User-Id") or "").strip()
    if not user_id:
        return None

    return Recipient(
        id=user_id,
        name=req.headers.get("X-User-Name", ""),
        email=req.headers.get("X-User-Email") or None,
        is_admin=_bool_env(req.headers.get("X-User-Admin"), False),
    )


def anonymous_identity(_req: Request) -> Optional[Recipient]:
    return None


def install_identity_loader(app: Flask, loader: IdentityLoader) -> None:
    """Populate ``g.current_user`` before every request."""

    @app.before_request
    def _load_identity() -> None:
        g.current_user = loader(request)
