"""Host-based routing guard"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse

from app.config import settings


def normalize_host(host: str) -> str:
    """Lower-case and drop any port"""
    host = (host or "").strip().lower()
    if host.startswith("["):
        # IPv6 literal, keep the brackets
        return host.split("]")[0] + "]"
    return host.split(":")[0]


class CanonicalHostMiddleware(BaseHTTPMiddleware):
    """
    Keep the platform admin on the platform host.

    Admin paths requested through a tenant's custom domain are redirected to
    the same path on the platform host, and the bare platform root goes to
    the login page.
    """

    def __init__(self, app, platform_host: str = None, admin_path: str = None):
        super().__init__(app)
        self.platform_host = normalize_host(platform_host or settings.platform_host)
        self.admin_path = (admin_path or settings.platform_admin_path).rstrip("/")

    def is_admin_path(self, path: str) -> bool:
        return path == self.admin_path or path.startswith(self.admin_path + "/")

    async def dispatch(self, request: Request, call_next):
        host = normalize_host(request.headers.get("host", ""))
        path = request.url.path

        if self.is_admin_path(path) and host != self.platform_host:
            target = f"https://{self.platform_host}{path}"
            if request.url.query:
                target = f"{target}?{request.url.query}"
            return RedirectResponse(target, status_code=307)

        if path == "/" and host == self.platform_host:
            return RedirectResponse("/login", status_code=307)

        return await call_next(request)
