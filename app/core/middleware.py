"""Middleware que aplica la política de rutas a cada request."""
import logging

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.config import Settings
from app.core.politica import PoliticaRutas
from app.core.sesion import SessionToken, leer_sesion

logger = logging.getLogger(__name__)


def token_de_request(request: Request, cookie_name: str) -> str | None:
    """Token desde ``Authorization: Bearer`` o, si no viene, desde la cookie de sesión."""
    auth = request.headers.get("authorization")
    if auth:
        scheme, _, credentials = auth.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    return request.cookies.get(cookie_name) or None


def sesion_de_request(request: Request, settings: Settings) -> SessionToken | None:
    return leer_sesion(settings, token_de_request(request, settings.session_cookie_name))


class AutorizacionRutasMiddleware(BaseHTTPMiddleware):
    """Permite, o redirige con 307, según ``PoliticaRutas.decidir``."""

    def __init__(self, app, settings: Settings, politica: PoliticaRutas):
        super().__init__(app)
        self.settings = settings
        self.politica = politica

    async def dispatch(self, request, call_next):
        sesion = sesion_de_request(request, self.settings)
        request.state.sesion = sesion

        decision = self.politica.decidir(request.url.path, sesion)
        if not decision.permitido:
            logger.debug(
                "Acceso denegado a %s (%s), redirigiendo a %s",
                request.url.path,
                decision.motivo,
                decision.redireccion,
            )
            return RedirectResponse(decision.redireccion or self.politica.login_url, status_code=307)

        return await call_next(request)
