import pytest
from httpx import ASGITransport, AsyncClient

from app.core.config import Settings
from app.core.database import Database
from app.core.politica import RolId
from app.core.security import hash_password
from app.core.sesion import emitir_sesion
from app.main import create_app
from app.models import Categoria, Marca, Producto, Rol, TipoDocumento, Usuario

PASSWORD = "clave123"
# bcrypt es lento: un solo hash para todos los usuarios de prueba
PASSWORD_HASH = hash_password(PASSWORD, rounds=4)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret_key="clave-de-pruebas",
        log_level="DEBUG",
        bcrypt_rounds=4,
    )


@pytest.fixture
async def database(settings):
    db = Database(settings.database_url_async)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def usuarios(database):
    """Roles y un usuario por rol, más un vendedor inactivo."""
    async with database.session() as s:
        s.add_all(
            [
                Rol(id=int(RolId.ADMIN), nombre="Administrador"),
                Rol(id=int(RolId.VENDEDOR), nombre="Vendedor"),
                Rol(id=int(RolId.BODEGUERO), nombre="Bodeguero"),
            ]
        )
        await s.flush()
        creados = {
            "admin": Usuario(nombre="Ana Admin", email="admin@stockly.cl", rol_id=int(RolId.ADMIN)),
            "vendedor": Usuario(nombre="Vicente Venta", email="vendedor@stockly.cl", rol_id=int(RolId.VENDEDOR)),
            "bodeguero": Usuario(nombre="Berta Bodega", email="bodega@stockly.cl", rol_id=int(RolId.BODEGUERO)),
            "inactivo": Usuario(
                nombre="Iván Inactivo", email="inactivo@stockly.cl", rol_id=int(RolId.VENDEDOR), activo=False
            ),
        }
        for u in creados.values():
            u.password_hash = PASSWORD_HASH
            if u.activo is None:
                u.activo = True
        s.add_all(creados.values())
        await s.flush()
    return creados


@pytest.fixture
async def catalogo(database):
    """Categorías, marcas, dos productos y los tipos de documento 33 y 39."""
    async with database.session() as s:
        bebidas = Categoria(nombre="Bebidas")
        lacteos = Categoria(nombre="Lácteos")
        limpieza = Categoria(nombre="Limpieza")
        marca = Marca(nombre="Colun")
        marca_libre = Marca(nombre="Soprole")
        s.add_all([bebidas, lacteos, limpieza, marca, marca_libre])
        s.add_all(
            [
                TipoDocumento(codigo_sii="33", nombre="Factura Electrónica"),
                TipoDocumento(codigo_sii="39", nombre="Boleta Electrónica"),
            ]
        )
        await s.flush()
        s.add_all(
            [
                Producto(
                    sku="SKU-1",
                    gtin="7801234567890",
                    nombre="Jugo de naranja",
                    categoria_id=bebidas.id,
                    marca_id=marca.id,
                    precio_venta=1000,
                    precio_compra=600,
                    stock=10,
                ),
                Producto(
                    sku="SKU-2",
                    nombre="Leche entera",
                    categoria_id=lacteos.id,
                    marca_id=marca.id,
                    precio_venta=2500,
                    precio_compra=1500,
                    stock=3,
                ),
            ]
        )
    return {
        "categoria_id": bebidas.id,
        "categoria_libre_id": limpieza.id,
        "marca_id": marca.id,
        "marca_libre_id": marca_libre.id,
    }


@pytest.fixture
def app(settings, database):
    return create_app(settings, database)


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest.fixture
def token(settings, usuarios):
    """Token de sesión firmado para uno de los usuarios de prueba."""

    def _token(nombre: str) -> str:
        u = usuarios[nombre]
        return emitir_sesion(settings, u.id, u.rol_id, u.email, u.activo).access_token

    return _token


@pytest.fixture
def auth(token):
    def _auth(nombre: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token(nombre)}"}

    return _auth
