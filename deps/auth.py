import os
from typing import Annotated

from fastapi import Header, HTTPException


def require_client(
    x_api_key: Annotated[str | None, Header(alias="x-api-key")] = None,
    x_admin_token: Annotated[str | None, Header(alias="x-admin-token")] = None,
) -> None:
    """
    Client/API guard. Accepts either:
      - X-Admin-Token that matches ADMIN_TOKEN (admins always allowed), or
      - X-Api-Key that matches QUIZ_API_KEY.
    """
    admin = os.getenv("ADMIN_TOKEN", "")
    if admin and x_admin_token == admin:
        return

    want = os.getenv("QUIZ_API_KEY", "")
    if not want:
        raise HTTPException(status_code=500, detail="QUIZ_API_KEY not configured on server.")
    if x_api_key != want:
        raise HTTPException(status_code=401, detail="Unauthorized.")
