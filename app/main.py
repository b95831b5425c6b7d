"""Punto de entrada de la aplicación FastAPI."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import router as api_router
from app.api.endpoints import paneles
from app.core.config import Settings, settings as default_settings
from app.core.database import Database
from app.core.errores import registrar_manejadores
from app.core.middleware import AutorizacionRutasMiddleware
from app.core.politica import PoliticaRutas
from app.models import *  # noqa: F401, F403 - Registra modelos en Base.metadata antes de create_all

logger = logging.getLogger(__name__)

# Documentación Swagger: disponible en /docs (OpenAPI 3.0)
OPENAPI_TAGS = [
    {
        "name": "auth",
        "description": "Login, logout, usuario actual y verificación de cuenta activa (checkActivo).",
    },
    {
        "name": "usuarios",
        "description": "Gestión de usuarios (solo Administrador).",
    },
    {
        "name": "roles",
        "description": "Tipos de usuario (solo Administrador).",
    },
    {
        "name": "productos",
        "description": "Catálogo de productos por SKU, con categoría, marca, precios y stock.",
    },
    {
        "name": "marcas",
        "description": "Marcas de productos.",
    },
    {
        "name": "categorias",
        "description": "Categorías de productos.",
    },
    {
        "name": "tipos-documento",
        "description": "Tipos de documento tributario por código SII.",
    },
    {
        "name": "clientes",
        "description": "Clientes asociables a una venta.",
    },
    {
        "name": "ventas",
        "description": "Registro de ventas con pago, detalle por producto y documento tributario.",
    },
    {
        "name": "reportes",
        "description": "Datos agregados para los gráficos del dashboard.",
    },
    {
        "name": "paneles",
        "description": "Páginas de los paneles por rol, protegidas por la política de rutas.",
    },
    {
        "name": "salud",
        "description": "Comprobación del estado del servicio.",
    },
]


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """Construye la aplicación con su configuración, pool de conexiones y política de rutas."""
    settings = settings or default_settings
    database = database or Database.from_settings(settings)
    politica = PoliticaRutas.from_settings(settings)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Gestiona el ciclo de vida: crea tablas al iniciar y cierra el pool al terminar."""
        await database.create_all()
        logger.info("Base de datos lista")
        yield
        await database.dispose()

    app = FastAPI(
        title=settings.app_name,
        description="""
API REST de **Stockly**: inventario, ventas y paneles por rol (Administrador, Vendedor, Bodeguero).

## Autenticación

1. Obtén un token con **POST /api/auth/login** (correo y contraseña).
2. Envíalo en `Authorization: Bearer <token>` o deja que el navegador use la cookie de sesión.
3. Las páginas de paneles (`/ventas`, `/bodega`, `/admin`, `/dashboard`) redirigen al login sin sesión
   y a `/` si el rol no tiene acceso.
""",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        swagger_ui_parameters={"persistAuthorization": True},
    )
    app.state.settings = settings
    app.state.database = database
    app.state.politica = politica

    registrar_manejadores(app)

    # El último middleware agregado es el más externo: CORS responde antes que la política
    app.add_middleware(AutorizacionRutasMiddleware, settings=settings, politica=politica)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api")
    app.include_router(paneles.router)

    @app.get(
        "/health",
        tags=["salud"],
        summary="Estado del servicio",
        response_description="Indica que la API está en ejecución",
    )
    async def health_check():
        """Comprueba que el servicio está activo. No requiere autenticación."""
        return {"status": "ok", "message": "Servicio en ejecución"}

    return app


app = create_app()
