"""Tool credentials.

The agent authenticates with the shared tool secret; internal callers may use
the service role key as a bearer token instead.
"""

from fastapi import Header

from storefront.errors import UnauthorizedError
from storefront.settings import load_settings


def require_tool_credentials(
    x_tool_secret: str = Header(default=""),
    authorization: str = Header(default=""),
) -> None:
    settings = load_settings()
    if settings.tool_secret and x_tool_secret == settings.tool_secret:
        return
    if settings.service_role_key and authorization.removeprefix("Bearer ").strip() == settings.service_role_key:
        return
    raise UnauthorizedError()
