"""Cliente que re-valida en cada navegación que la cuenta siga activa.

En cada cambio de ruta consulta ``GET /api/auth/checkActivo`` con la
credencial actual:

- ``200`` con ``activo: false``: cierra la sesión local y navega al login.
- ``401``: no hace nada; la política de rutas se encarga de las rutas protegidas.
- Errores de red, de servidor o de parseo: se registran y la sesión se
  mantiene hasta la próxima verificación exitosa.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

import requests

logger = logging.getLogger(__name__)

RUTA_CHECK_ACTIVO = "/api/auth/checkActivo"
LOGIN_URL = "/auth/login"


class ResultadoVerificacion(str, Enum):
    ACTIVA = "activa"
    CERRADA = "cerrada"
    NO_AUTENTICADA = "no_autenticada"
    SIN_CAMBIOS = "sin_cambios"


@dataclass
class SesionCliente:
    """Credencial que el cliente mantiene entre navegaciones."""

    token: str | None = None

    @property
    def autenticada(self) -> bool:
        return bool(self.token)

    def cerrar(self) -> None:
        self.token = None


class VerificadorActividad:
    """Verifica la cuenta contra el backend cada vez que el cliente navega."""

    def __init__(
        self,
        base_url: str,
        sesion: SesionCliente,
        navegar: Callable[[str], None],
        http: requests.Session | None = None,
        timeout: float = 5.0,
        login_url: str = LOGIN_URL,
    ):
        self.base_url = base_url.rstrip("/")
        self.sesion = sesion
        self.navegar = navegar
        self.http = http or requests.Session()
        self.timeout = timeout
        self.login_url = login_url

    def al_navegar(self, ruta: str) -> ResultadoVerificacion:
        if not self.sesion.autenticada:
            return ResultadoVerificacion.NO_AUTENTICADA

        try:
            resp = self.http.get(
                f"{self.base_url}{RUTA_CHECK_ACTIVO}",
                headers={
                    "Authorization": f"Bearer {self.sesion.token}",
                    "x-pathname": ruta,
                },
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("checkActivo falló al navegar a %s: %s", ruta, exc)
            return ResultadoVerificacion.SIN_CAMBIOS

        if resp.status_code == 401:
            return ResultadoVerificacion.NO_AUTENTICADA
        if resp.status_code != 200:
            logger.warning("checkActivo respondió %s al navegar a %s", resp.status_code, ruta)
            return ResultadoVerificacion.SIN_CAMBIOS

        try:
            data = resp.json()
        except ValueError:
            logger.warning("checkActivo devolvió una respuesta que no es JSON")
            return ResultadoVerificacion.SIN_CAMBIOS

        if isinstance(data, dict) and data.get("activo") is False:
            logger.info("Cuenta desactivada; cerrando sesión")
            self.sesion.cerrar()
            self.navegar(self.login_url)
            return ResultadoVerificacion.CERRADA
        return ResultadoVerificacion.ACTIVA
