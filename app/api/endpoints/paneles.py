"""Páginas de los paneles por rol.

Estas rutas no cuelgan de ``/api``: el middleware de autorización decide el
acceso por rol antes de que llegue el request. Cada handler además exige una
cuenta activa.
"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.endpoints.auth import get_current_user, get_politica, usuario_a_item
from app.api.endpoints.ventas import venta_a_item
from app.core.database import get_db
from app.core.politica import PoliticaRutas
from app.models import Usuario, Venta
from app.services import reporte_service, venta_service

router = APIRouter(tags=["paneles"])

PANELES = ("/ventas", "/bodega", "/admin", "/dashboard")
ULTIMAS_VENTAS = 10


@router.get("/", summary="Inicio")
async def inicio(
    request: Request,
    current_user: Usuario = Depends(get_current_user),
    politica: PoliticaRutas = Depends(get_politica),
):
    """Usuario actual y paneles a los que su rol puede entrar."""
    sesion = request.state.sesion.model_copy(update={"role": current_user.rol_id})
    return {
        "usuario": usuario_a_item(current_user),
        "paneles": [p for p in PANELES if politica.decidir(p, sesion).permitido],
    }


@router.get("/profile", summary="Perfil")
async def perfil(current_user: Usuario = Depends(get_current_user)):
    return usuario_a_item(current_user)


@router.get("/ventas", summary="Panel de ventas")
async def panel_ventas(
    db: AsyncSession = Depends(get_db),
    current_user: Usuario = Depends(get_current_user),
):
    """Últimas ventas registradas por el usuario actual."""
    result = await db.execute(
        select(Venta)
        .options(*venta_service.opciones_venta())
        .where(Venta.vendedor_id == current_user.id)
        .order_by(Venta.id.desc())
        .limit(ULTIMAS_VENTAS)
    )
    ventas = [venta_a_item(v) for v in result.scalars().all()]
    return {"vendedor": current_user.nombre, "ultimas_ventas": ventas}


@router.get("/bodega", summary="Panel de bodega")
async def panel_bodega(
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(get_current_user),
):
    return {"stock_bajo": await reporte_service.stock_bajo(db)}


@router.get("/admin", summary="Panel de administración")
async def panel_admin(
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(get_current_user),
):
    return await reporte_service.resumen_general(db)


@router.get("/dashboard", summary="Gráficos")
async def dashboard(
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(get_current_user),
):
    """Datos de los tres gráficos del dashboard."""
    return {
        "ventas_por_categoria": await reporte_service.ventas_por_categoria(db),
        "ventas_por_dia": await reporte_service.ventas_por_dia(db),
        "stock_bajo": await reporte_service.stock_bajo(db),
    }
