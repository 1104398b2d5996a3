from typing import Optional

from pydantic import BaseModel


class Identity(BaseModel):
    """Аутентифицированный пользователь. ``handle`` - непрозрачный id провайдера."""
    handle: str
    display_name: Optional[str] = None
    email: Optional[str] = None


class MeResponse(BaseModel):
    identity: Optional[Identity] = None
    signature: str = ""
