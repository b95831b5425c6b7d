from app.models import Rol, Usuario
from tests.conftest import PASSWORD_HASH


class TestRoles:
    async def test_listar(self, client, auth, usuarios):
        resp = await client.get("/api/roles", headers=auth("admin"))
        assert resp.status_code == 200
        assert resp.json() == [
            {"id": 1, "nombre": "Administrador"},
            {"id": 2, "nombre": "Vendedor"},
            {"id": 3, "nombre": "Bodeguero"},
        ]

    async def test_solo_admin(self, client, auth, usuarios):
        for nombre in ("vendedor", "bodeguero"):
            assert (await client.get("/api/roles", headers=auth(nombre))).status_code == 403

    async def test_crear_renombrar_y_eliminar(self, client, auth, usuarios):
        resp = await client.post("/api/roles", json={"nombre": "Cajero"}, headers=auth("admin"))
        assert resp.status_code == 201
        rol_id = resp.json()["id"]
        assert rol_id > 3

        resp = await client.put(f"/api/roles/{rol_id}", json={"nombre": "Cajero Jefe"}, headers=auth("admin"))
        assert resp.json()["nombre"] == "Cajero Jefe"

        resp = await client.delete(f"/api/roles/{rol_id}", headers=auth("admin"))
        assert resp.status_code == 204
        assert (await client.get(f"/api/roles/{rol_id}", headers=auth("admin"))).status_code == 404

    async def test_nombre_duplicado(self, client, auth, usuarios):
        resp = await client.post("/api/roles", json={"nombre": "vendedor"}, headers=auth("admin"))
        assert resp.status_code == 409

    async def test_roles_del_sistema_no_se_eliminan(self, client, auth, usuarios):
        resp = await client.delete("/api/roles/3", headers=auth("admin"))
        assert resp.status_code == 400

    async def test_rol_con_usuarios(self, client, auth, database, usuarios):
        async with database.session() as s:
            rol = Rol(nombre="Auditor")
            s.add(rol)
            await s.flush()
            s.add(Usuario(nombre="Aldo Auditor", email="auditor@stockly.cl", rol_id=rol.id, password_hash=PASSWORD_HASH))
            await s.flush()
            rol_id = rol.id

        resp = await client.delete(f"/api/roles/{rol_id}", headers=auth("admin"))
        assert resp.status_code == 409
        assert "usuarios asociados" in resp.json()["error"]
