from sqlalchemy.exc import OperationalError

from app.core.database import get_db
from app.core.sesion import emitir_sesion
from tests.conftest import PASSWORD


class TestLogin:
    async def test_login_correcto(self, client, usuarios):
        resp = await client.post("/api/auth/login", json={"email": "vendedor@stockly.cl", "password": PASSWORD})
        assert resp.status_code == 200
        data = resp.json()
        assert data["id"] == usuarios["vendedor"].id
        assert data["email"] == "vendedor@stockly.cl"
        assert data["role"] == 2
        assert data["token"]
        assert resp.cookies.get("stockly.session-token") == data["token"]

    async def test_token_del_login_abre_paneles(self, client, usuarios):
        resp = await client.post("/api/auth/login", json={"email": "admin@stockly.cl", "password": PASSWORD})
        token = resp.json()["token"]
        resp = await client.get("/profile", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 200

    async def test_contrasena_incorrecta(self, client, usuarios):
        resp = await client.post("/api/auth/login", json={"email": "vendedor@stockly.cl", "password": "mala"})
        assert resp.status_code == 401
        assert resp.json() == {"error": "Credenciales inválidas"}

    async def test_correo_desconocido(self, client, usuarios):
        resp = await client.post("/api/auth/login", json={"email": "nadie@stockly.cl", "password": PASSWORD})
        assert resp.status_code == 401
        assert resp.json() == {"error": "Credenciales inválidas"}

    async def test_cuenta_inactiva_mismo_mensaje(self, client, usuarios):
        resp = await client.post("/api/auth/login", json={"email": "inactivo@stockly.cl", "password": PASSWORD})
        assert resp.status_code == 401
        assert resp.json() == {"error": "Credenciales inválidas"}

    async def test_body_invalido(self, client, usuarios):
        resp = await client.post("/api/auth/login", json={"email": "no-es-correo", "password": PASSWORD})
        assert resp.status_code == 400
        data = resp.json()
        assert data["error"] == "Datos inválidos"
        assert data["detalles"][0]["campo"] == "email"

    async def test_logout_borra_cookie(self, client, usuarios):
        resp = await client.post("/api/auth/logout")
        assert resp.status_code == 200
        assert "stockly.session-token=" in resp.headers["set-cookie"]


class TestCheckActivo:
    async def test_sin_token(self, client, usuarios):
        resp = await client.get("/api/auth/checkActivo")
        assert resp.status_code == 401
        assert resp.json() == {"error": "not_authenticated"}

    async def test_cuenta_activa(self, client, auth, usuarios):
        resp = await client.get("/api/auth/checkActivo", headers=auth("vendedor"))
        assert resp.status_code == 200
        assert resp.json() == {
            "activo": True,
            "id": usuarios["vendedor"].id,
            "role": 2,
            "canAccess": True,
        }

    async def test_cuenta_desactivada(self, client, auth):
        resp = await client.get("/api/auth/checkActivo", headers=auth("inactivo"))
        assert resp.status_code == 200
        assert resp.json()["activo"] is False
        assert resp.json()["canAccess"] is False

    async def test_usuario_eliminado(self, client, settings, usuarios):
        token = emitir_sesion(settings, 9999, 1, "fantasma@stockly.cl").access_token
        resp = await client.get("/api/auth/checkActivo", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 404
        assert resp.json() == {"error": "not_found"}

    async def test_can_access_segun_ruta(self, client, auth):
        headers = {**auth("vendedor"), "x-pathname": "/ventas/nueva"}
        assert (await client.get("/api/auth/checkActivo", headers=headers)).json()["canAccess"] is True

        headers = {**auth("vendedor"), "x-pathname": "/dashboard"}
        assert (await client.get("/api/auth/checkActivo", headers=headers)).json()["canAccess"] is False

    async def test_can_access_usa_el_rol_actual(self, client, auth, usuarios):
        # El admin cambia al vendedor a bodeguero; el token del vendedor sigue diciendo rol 2
        vendedor_id = usuarios["vendedor"].id
        resp = await client.patch(f"/api/usuarios/{vendedor_id}", json={"id_tipo": 3}, headers=auth("admin"))
        assert resp.status_code == 200

        headers = {**auth("vendedor"), "x-pathname": "/bodega"}
        data = (await client.get("/api/auth/checkActivo", headers=headers)).json()
        assert data["role"] == 3
        assert data["canAccess"] is True

    async def test_desactivacion_se_refleja_de_inmediato(self, client, auth, usuarios):
        vendedor_id = usuarios["vendedor"].id
        await client.patch(f"/api/usuarios/{vendedor_id}", json={"activo": False}, headers=auth("admin"))
        resp = await client.get("/api/auth/checkActivo", headers=auth("vendedor"))
        assert resp.json()["activo"] is False

    async def test_error_de_base_de_datos(self, app, client, auth):
        class SesionCaida:
            async def execute(self, *args, **kwargs):
                raise OperationalError("SELECT 1", {}, Exception("sin conexión"))

        async def db_caida():
            yield SesionCaida()

        app.dependency_overrides[get_db] = db_caida
        try:
            resp = await client.get("/api/auth/checkActivo", headers=auth("vendedor"))
        finally:
            app.dependency_overrides.clear()
        assert resp.status_code == 500
        assert resp.json() == {"error": "server_error"}

        assert (await client.get("/health")).status_code == 200
        assert (await client.get("/api/auth/checkActivo", headers=auth("vendedor"))).status_code == 200


class TestMe:
    async def test_usuario_actual(self, client, auth):
        resp = await client.get("/api/auth/me", headers=auth("bodeguero"))
        assert resp.status_code == 200
        assert resp.json()["email"] == "bodega@stockly.cl"
        assert resp.json()["estado"] == "Activo"

    async def test_sin_token(self, client, usuarios):
        resp = await client.get("/api/auth/me")
        assert resp.status_code == 401
        assert resp.headers["www-authenticate"] == "Bearer"

    async def test_cuenta_inactiva(self, client, auth):
        resp = await client.get("/api/auth/me", headers=auth("inactivo"))
        assert resp.status_code == 403
