import pytest


@pytest.fixture
def nuevo(catalogo):
    return {
        "sku": " SKU-3 ",
        "gtin": "",
        "nombre": "Detergente",
        "id_categoria": catalogo["categoria_libre_id"],
        "id_marca": catalogo["marca_id"],
        "precio_venta": 3990,
        "precio_compra": 2500,
        "stock": 12,
    }


class TestLecturaProductos:
    async def test_cualquier_rol_lista(self, client, auth, catalogo):
        for nombre in ("admin", "vendedor", "bodeguero"):
            resp = await client.get("/api/productos", headers=auth(nombre))
            assert resp.status_code == 200
            assert [p["sku"] for p in resp.json()] == ["SKU-1", "SKU-2"]

    async def test_detalle_con_categoria_y_marca(self, client, auth, catalogo):
        resp = await client.get("/api/productos/SKU-1", headers=auth("vendedor"))
        data = resp.json()
        assert data["categoria"] == {"id": catalogo["categoria_id"], "nombre": "Bebidas"}
        assert data["marca"]["nombre"] == "Colun"
        assert data["precio_venta"] == 1000

    async def test_sku_inexistente(self, client, auth, catalogo):
        resp = await client.get("/api/productos/NO-EXISTE", headers=auth("vendedor"))
        assert resp.status_code == 404


class TestCrearProducto:
    async def test_crear(self, client, auth, nuevo):
        resp = await client.post("/api/productos", json=nuevo, headers=auth("bodeguero"))
        assert resp.status_code == 201
        data = resp.json()
        assert data["sku"] == "SKU-3"
        assert data["gtin"] is None
        assert data["categoria"]["nombre"] == "Limpieza"

    async def test_sku_duplicado(self, client, auth, nuevo):
        nuevo["sku"] = "SKU-1"
        resp = await client.post("/api/productos", json=nuevo, headers=auth("admin"))
        assert resp.status_code == 409

    async def test_categoria_inexistente(self, client, auth, nuevo):
        nuevo["id_categoria"] = 9999
        resp = await client.post("/api/productos", json=nuevo, headers=auth("admin"))
        assert resp.status_code == 400

    async def test_precio_negativo(self, client, auth, nuevo):
        nuevo["precio_venta"] = -1
        resp = await client.post("/api/productos", json=nuevo, headers=auth("admin"))
        assert resp.status_code == 400

    async def test_vendedor_no_crea(self, client, auth, nuevo):
        resp = await client.post("/api/productos", json=nuevo, headers=auth("vendedor"))
        assert resp.status_code == 403


class TestActualizarProducto:
    def body(self, catalogo, **cambios):
        data = {
            "nombre": "Jugo de naranja 1L",
            "id_categoria": catalogo["categoria_id"],
            "id_marca": catalogo["marca_id"],
            "precio_venta": 1200,
            "precio_compra": 700,
            "stock": 20,
        }
        data.update(cambios)
        return data

    async def test_actualizar_datos(self, client, auth, catalogo):
        resp = await client.put("/api/productos/SKU-1", json=self.body(catalogo), headers=auth("bodeguero"))
        assert resp.status_code == 200
        assert resp.json()["precio_venta"] == 1200
        assert resp.json()["stock"] == 20

    async def test_renombrar_sku(self, client, auth, catalogo):
        resp = await client.put("/api/productos/SKU-1", json=self.body(catalogo, sku="JUGO-1"), headers=auth("admin"))
        assert resp.status_code == 200
        assert resp.json()["sku"] == "JUGO-1"
        assert (await client.get("/api/productos/SKU-1", headers=auth("admin"))).status_code == 404
        assert (await client.get("/api/productos/JUGO-1", headers=auth("admin"))).status_code == 200

    async def test_renombrar_a_sku_existente(self, client, auth, catalogo):
        resp = await client.put("/api/productos/SKU-1", json=self.body(catalogo, sku="SKU-2"), headers=auth("admin"))
        assert resp.status_code == 409

    async def test_producto_inexistente(self, client, auth, catalogo):
        resp = await client.put("/api/productos/NO-EXISTE", json=self.body(catalogo), headers=auth("admin"))
        assert resp.status_code == 404


class TestEliminarProducto:
    async def test_eliminar_devuelve_el_producto(self, client, auth, catalogo):
        resp = await client.delete("/api/productos/SKU-2", headers=auth("bodeguero"))
        assert resp.status_code == 200
        assert resp.json()["nombre"] == "Leche entera"
        assert (await client.get("/api/productos/SKU-2", headers=auth("admin"))).status_code == 404

    async def test_producto_vendido(self, client, auth, catalogo):
        venta = {"detalles": [{"sku": "SKU-2", "cantidad": 1}]}
        assert (await client.post("/api/ventas", json=venta, headers=auth("vendedor"))).status_code == 201
        resp = await client.delete("/api/productos/SKU-2", headers=auth("admin"))
        assert resp.status_code == 409
