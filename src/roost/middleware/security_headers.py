"""Standard security response headers.

Each header can be switched off by passing ``None`` for its option. The
production pipeline disables the content-security, cross-origin-embedder and
cross-origin-resource policies because the templated pages load third-party
assets.
"""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

DEFAULT_CSP = (
    "default-src 'self';base-uri 'self';font-src 'self' https: data:;"
    "form-action 'self';frame-ancestors 'self';img-src 'self' data:;"
    "object-src 'none';script-src 'self';script-src-attr 'none';"
    "style-src 'self' https: 'unsafe-inline';upgrade-insecure-requests"
)

DEFAULT_HEADERS = {
    "Cross-Origin-Opener-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}

REMOVED_HEADERS = ("X-Powered-By",)


class SecurityHeadersStage(BaseHTTPMiddleware):
    def __init__(
        self,
        app: object,
        content_security_policy: str | None = DEFAULT_CSP,
        cross_origin_embedder_policy: str | None = "require-corp",
        cross_origin_resource_policy: str | None = "same-origin",
    ) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self.content_security_policy = content_security_policy
        self.cross_origin_embedder_policy = cross_origin_embedder_policy
        self.cross_origin_resource_policy = cross_origin_resource_policy

    def get_security_headers(self) -> dict[str, str]:
        headers = dict(DEFAULT_HEADERS)
        if self.content_security_policy is not None:
            headers["Content-Security-Policy"] = self.content_security_policy
        if self.cross_origin_embedder_policy is not None:
            headers["Cross-Origin-Embedder-Policy"] = self.cross_origin_embedder_policy
        if self.cross_origin_resource_policy is not None:
            headers["Cross-Origin-Resource-Policy"] = self.cross_origin_resource_policy
        return headers

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        for header, value in self.get_security_headers().items():
            response.headers[header] = value
        for header in REMOVED_HEADERS:
            if header in response.headers:
                del response.headers[header]
        return response
