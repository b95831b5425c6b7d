"""Routers de la API."""
from fastapi import APIRouter

from app.api.endpoints import (
    auth,
    categorias,
    clientes,
    marcas,
    productos,
    reportes,
    roles,
    tipos_documento,
    usuarios,
    ventas,
)

router = APIRouter()
router.include_router(auth.router)
router.include_router(usuarios.router)
router.include_router(roles.router)
router.include_router(productos.router)
router.include_router(marcas.router)
router.include_router(categorias.router)
router.include_router(tipos_documento.router)
router.include_router(clientes.router)
router.include_router(ventas.router)
router.include_router(reportes.router)


@router.get(
    "/",
    tags=["api"],
    summary="Raíz de la API",
    response_description="Mensaje de bienvenida y enlace a la documentación",
)
async def api_root():
    """Información básica de la API y enlace a la documentación Swagger."""
    return {"message": "Stockly API", "docs": "/docs", "redoc": "/redoc"}
