from typing import Optional

from fastapi import Depends, Header

from .config import Settings, get_settings
from .errors import unauthenticated

API_KEY_HEADER = "x-api-key"


def check_api_key(supplied: Optional[str], expected: str) -> None:
    if not supplied or supplied != expected:
        raise unauthenticated("Invalid or missing API key")


async def require_api_key(
    x_api_key: Optional[str] = Header(None, alias=API_KEY_HEADER),
    settings: Settings = Depends(get_settings),
) -> None:
    """Auth stage for mutating routes: shared-secret header comparison."""
    check_api_key(x_api_key, settings.api_key)
