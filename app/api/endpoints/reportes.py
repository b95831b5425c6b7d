"""Endpoints de reportes: datos para los gráficos del panel de administración."""
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.endpoints.auth import require_roles
from app.core.database import get_db
from app.core.politica import RolId
from app.models import Usuario
from app.schemas.reporte import StockBajoItem, VentasPorCategoriaItem, VentasPorDiaItem
from app.services import reporte_service

router = APIRouter(prefix="/reportes", tags=["reportes"])


@router.get(
    "/ventas-por-categoria",
    response_model=list[VentasPorCategoriaItem],
    summary="Unidades vendidas por categoría",
)
async def ventas_por_categoria(
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(RolId.ADMIN)),
):
    return await reporte_service.ventas_por_categoria(db)


@router.get("/ventas-por-dia", response_model=list[VentasPorDiaItem], summary="Ventas por día")
async def ventas_por_dia(
    desde: date | None = Query(default=None, description="Fecha inicial (inclusive)"),
    hasta: date | None = Query(default=None, description="Fecha final (inclusive)"),
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(RolId.ADMIN)),
):
    return await reporte_service.ventas_por_dia(db, desde, hasta)


@router.get("/stock-bajo", response_model=list[StockBajoItem], summary="Productos con stock bajo")
async def stock_bajo(
    umbral: int = Query(default=reporte_service.UMBRAL_STOCK_BAJO, ge=0),
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(RolId.ADMIN, RolId.BODEGUERO)),
):
    return await reporte_service.stock_bajo(db, umbral)
