class TestRedirecciones:
    async def test_sin_token_redirige_al_login(self, client, usuarios):
        resp = await client.get("/ventas")
        assert resp.status_code == 307
        assert resp.headers["location"] == "/login"

    async def test_token_malformado_se_trata_como_ausente(self, client, usuarios):
        resp = await client.get("/admin", headers={"Authorization": "Bearer basura"})
        assert resp.status_code == 307
        assert resp.headers["location"] == "/login"

    async def test_rol_sin_acceso_redirige_a_inicio(self, client, auth):
        resp = await client.get("/bodega", headers=auth("vendedor"))
        assert resp.status_code == 307
        assert resp.headers["location"] == "/"

    async def test_vendedor_no_entra_a_rutas_de_admin(self, client, auth):
        for ruta in ("/admin", "/dashboard"):
            resp = await client.get(ruta, headers=auth("vendedor"))
            assert resp.status_code == 307

    async def test_rutas_publicas_sin_token(self, client, usuarios):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

    async def test_api_no_redirige_y_responde_401(self, client, usuarios):
        resp = await client.get("/api/productos")
        assert resp.status_code == 401
        assert "error" in resp.json()


class TestPaneles:
    async def test_vendedor_en_panel_de_ventas(self, client, auth, catalogo):
        resp = await client.get("/ventas", headers=auth("vendedor"))
        assert resp.status_code == 200
        assert resp.json() == {"vendedor": "Vicente Venta", "ultimas_ventas": []}

    async def test_bodeguero_en_panel_de_bodega(self, client, auth, catalogo):
        resp = await client.get("/bodega", headers=auth("bodeguero"))
        assert resp.status_code == 200
        assert [p["sku"] for p in resp.json()["stock_bajo"]] == ["SKU-2"]

    async def test_token_en_cookie(self, client, token, catalogo):
        resp = await client.get("/bodega", headers={"Cookie": f"stockly.session-token={token('bodeguero')}"})
        assert resp.status_code == 200

    async def test_inicio_lista_paneles_del_rol(self, client, auth):
        resp = await client.get("/", headers=auth("vendedor"))
        assert resp.status_code == 200
        data = resp.json()
        assert data["usuario"]["email"] == "vendedor@stockly.cl"
        assert data["paneles"] == ["/ventas"]

        resp = await client.get("/", headers=auth("admin"))
        assert resp.json()["paneles"] == ["/ventas", "/bodega", "/admin", "/dashboard"]

    async def test_perfil(self, client, auth):
        resp = await client.get("/profile", headers=auth("bodeguero"))
        assert resp.status_code == 200
        assert resp.json()["rol"] == "Bodeguero"

    async def test_cuenta_inactiva_con_token_vigente(self, client, auth):
        resp = await client.get("/ventas", headers=auth("inactivo"))
        assert resp.status_code == 403

    async def test_panel_admin(self, client, auth, catalogo):
        resp = await client.get("/admin", headers=auth("admin"))
        assert resp.status_code == 200
        assert resp.json() == {"total_ventas": 0, "cantidad_ventas": 0, "productos": 2, "usuarios_activos": 3}
