import pytest


@pytest.fixture
async def ventas(client, auth, catalogo):
    for detalles in (
        [{"sku": "SKU-1", "cantidad": 3}],
        [{"sku": "SKU-1", "cantidad": 1}, {"sku": "SKU-2", "cantidad": 2}],
    ):
        resp = await client.post("/api/ventas", json={"detalles": detalles}, headers=auth("vendedor"))
        assert resp.status_code == 201


class TestReportes:
    async def test_ventas_por_categoria(self, client, auth, ventas):
        resp = await client.get("/api/reportes/ventas-por-categoria", headers=auth("admin"))
        assert resp.status_code == 200
        assert resp.json() == [
            {"categoria": "Bebidas", "cantidad": 4},
            {"categoria": "Lácteos", "cantidad": 2},
        ]

    async def test_ventas_por_dia(self, client, auth, ventas):
        resp = await client.get("/api/reportes/ventas-por-dia", headers=auth("admin"))
        dias = resp.json()
        assert len(dias) == 1
        assert dias[0]["cantidad_ventas"] == 2
        assert dias[0]["total"] == 3000 + 1000 + 5000

    async def test_stock_bajo(self, client, auth, ventas):
        resp = await client.get("/api/reportes/stock-bajo", headers=auth("bodeguero"))
        assert resp.json() == [{"sku": "SKU-2", "nombre": "Leche entera", "stock": 1}]

        resp = await client.get("/api/reportes/stock-bajo", params={"umbral": 6}, headers=auth("admin"))
        assert [p["sku"] for p in resp.json()] == ["SKU-2", "SKU-1"]

    async def test_sin_ventas(self, client, auth, catalogo):
        resp = await client.get("/api/reportes/ventas-por-categoria", headers=auth("admin"))
        assert resp.json() == []

    async def test_vendedor_no_ve_reportes(self, client, auth, catalogo):
        resp = await client.get("/api/reportes/ventas-por-dia", headers=auth("vendedor"))
        assert resp.status_code == 403


class TestPanelesConVentas:
    async def test_resumen_admin(self, client, auth, ventas):
        resp = await client.get("/admin", headers=auth("admin"))
        assert resp.json()["total_ventas"] == 9000
        assert resp.json()["cantidad_ventas"] == 2

    async def test_dashboard(self, client, auth, ventas):
        resp = await client.get("/dashboard", headers=auth("admin"))
        assert resp.status_code == 200
        data = resp.json()
        assert set(data) == {"ventas_por_categoria", "ventas_por_dia", "stock_bajo"}
        assert data["ventas_por_dia"][0]["cantidad_ventas"] == 2
