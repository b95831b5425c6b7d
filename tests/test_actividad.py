import pytest
import requests

from app.services.actividad import (
    LOGIN_URL,
    ResultadoVerificacion,
    SesionCliente,
    VerificadorActividad,
)


class RespuestaFalsa:
    def __init__(self, status_code=200, data=None, json_invalido=False):
        self.status_code = status_code
        self._data = data
        self._json_invalido = json_invalido

    def json(self):
        if self._json_invalido:
            raise ValueError("respuesta sin JSON")
        return self._data


class HttpFalso:
    """Sustituto de requests.Session que registra las llamadas."""

    def __init__(self, respuesta=None, error=None):
        self.respuesta = respuesta
        self.error = error
        self.llamadas = []

    def get(self, url, headers=None, timeout=None):
        self.llamadas.append({"url": url, "headers": headers, "timeout": timeout})
        if self.error:
            raise self.error
        return self.respuesta


@pytest.fixture
def navegaciones():
    return []


def verificador(http, navegaciones, token="token-vigente"):
    return VerificadorActividad(
        "http://stockly.local/",
        SesionCliente(token=token),
        navegaciones.append,
        http=http,
    )


class TestVerificadorActividad:
    def test_cuenta_activa(self, navegaciones):
        http = HttpFalso(RespuestaFalsa(200, {"activo": True, "id": 1, "role": 2, "canAccess": True}))
        v = verificador(http, navegaciones)
        assert v.al_navegar("/ventas") == ResultadoVerificacion.ACTIVA
        assert v.sesion.token == "token-vigente"
        assert navegaciones == []

    def test_envia_credencial_y_ruta(self, navegaciones):
        http = HttpFalso(RespuestaFalsa(200, {"activo": True}))
        verificador(http, navegaciones).al_navegar("/bodega/stock")
        llamada = http.llamadas[0]
        assert llamada["url"] == "http://stockly.local/api/auth/checkActivo"
        assert llamada["headers"]["Authorization"] == "Bearer token-vigente"
        assert llamada["headers"]["x-pathname"] == "/bodega/stock"
        assert llamada["timeout"] == 5.0

    def test_cuenta_desactivada_cierra_sesion(self, navegaciones):
        http = HttpFalso(RespuestaFalsa(200, {"activo": False, "id": 1, "role": 2, "canAccess": False}))
        v = verificador(http, navegaciones)
        assert v.al_navegar("/ventas") == ResultadoVerificacion.CERRADA
        assert not v.sesion.autenticada
        assert navegaciones == [LOGIN_URL]
        assert LOGIN_URL == "/auth/login"

    def test_sin_sesion_no_consulta(self, navegaciones):
        http = HttpFalso(RespuestaFalsa(200, {"activo": False}))
        v = verificador(http, navegaciones, token=None)
        assert v.al_navegar("/ventas") == ResultadoVerificacion.NO_AUTENTICADA
        assert http.llamadas == []

    def test_401_no_hace_nada(self, navegaciones):
        http = HttpFalso(RespuestaFalsa(401, {"error": "not_authenticated"}))
        v = verificador(http, navegaciones)
        assert v.al_navegar("/ventas") == ResultadoVerificacion.NO_AUTENTICADA
        assert v.sesion.token == "token-vigente"
        assert navegaciones == []

    @pytest.mark.parametrize("codigo", [404, 500, 502])
    def test_error_del_servidor_mantiene_sesion(self, navegaciones, codigo):
        v = verificador(HttpFalso(RespuestaFalsa(codigo, {"error": "server_error"})), navegaciones)
        assert v.al_navegar("/ventas") == ResultadoVerificacion.SIN_CAMBIOS
        assert v.sesion.autenticada
        assert navegaciones == []

    def test_error_de_red_mantiene_sesion(self, navegaciones):
        v = verificador(HttpFalso(error=requests.ConnectionError("sin red")), navegaciones)
        assert v.al_navegar("/ventas") == ResultadoVerificacion.SIN_CAMBIOS
        assert v.sesion.autenticada

    def test_timeout_mantiene_sesion(self, navegaciones):
        v = verificador(HttpFalso(error=requests.Timeout("lento")), navegaciones)
        assert v.al_navegar("/ventas") == ResultadoVerificacion.SIN_CAMBIOS

    def test_json_invalido_mantiene_sesion(self, navegaciones):
        v = verificador(HttpFalso(RespuestaFalsa(200, json_invalido=True)), navegaciones)
        assert v.al_navegar("/ventas") == ResultadoVerificacion.SIN_CAMBIOS
        assert v.sesion.autenticada

    def test_respuesta_sin_campo_activo(self, navegaciones):
        v = verificador(HttpFalso(RespuestaFalsa(200, ["inesperado"])), navegaciones)
        assert v.al_navegar("/ventas") == ResultadoVerificacion.ACTIVA
        assert navegaciones == []

    def test_segunda_navegacion_tras_cierre_no_consulta(self, navegaciones):
        http = HttpFalso(RespuestaFalsa(200, {"activo": False}))
        v = verificador(http, navegaciones)
        v.al_navegar("/ventas")
        assert v.al_navegar("/profile") == ResultadoVerificacion.NO_AUTENTICADA
        assert len(http.llamadas) == 1


class TestContraLaApi:
    async def test_desactivar_y_verificar(self, client, auth, token, usuarios):
        """Respuesta real de checkActivo interpretada por el verificador."""
        vendedor_id = usuarios["vendedor"].id
        await client.patch(f"/api/usuarios/{vendedor_id}", json={"activo": False}, headers=auth("admin"))
        resp = await client.get(
            "/api/auth/checkActivo",
            headers={"Authorization": f"Bearer {token('vendedor')}", "x-pathname": "/ventas"},
        )

        navegaciones = []
        v = verificador(HttpFalso(RespuestaFalsa(resp.status_code, resp.json())), navegaciones)
        assert v.al_navegar("/ventas") == ResultadoVerificacion.CERRADA
        assert navegaciones == ["/auth/login"]
