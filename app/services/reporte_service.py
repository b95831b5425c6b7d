"""Agregaciones para los gráficos de los paneles (ventas por categoría, por día, stock bajo)."""
from datetime import date, datetime, time, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Categoria, DetalleVenta, Producto, Usuario, Venta
from app.schemas.reporte import StockBajoItem, VentasPorCategoriaItem, VentasPorDiaItem

UMBRAL_STOCK_BAJO = 5


async def ventas_por_categoria(db: AsyncSession) -> list[VentasPorCategoriaItem]:
    """Unidades vendidas acumuladas por categoría de producto."""
    q = (
        select(Categoria.nombre, func.sum(DetalleVenta.cantidad))
        .join(Producto, Producto.sku == DetalleVenta.sku)
        .join(Categoria, Categoria.id == Producto.categoria_id)
        .group_by(Categoria.nombre)
        .order_by(Categoria.nombre)
    )
    result = await db.execute(q)
    return [VentasPorCategoriaItem(categoria=nombre, cantidad=int(cantidad or 0)) for nombre, cantidad in result.all()]


async def ventas_por_dia(
    db: AsyncSession,
    desde: date | None = None,
    hasta: date | None = None,
) -> list[VentasPorDiaItem]:
    """Número de ventas y monto total por día, en orden cronológico."""
    dia = func.date(Venta.fecha)
    q = select(dia, func.count(Venta.id), func.sum(Venta.total)).group_by(dia).order_by(dia)
    if desde:
        q = q.where(Venta.fecha >= datetime.combine(desde, time.min, tzinfo=timezone.utc))
    if hasta:
        q = q.where(Venta.fecha <= datetime.combine(hasta, time.max, tzinfo=timezone.utc))
    result = await db.execute(q)
    return [
        VentasPorDiaItem(fecha=fecha, cantidad_ventas=cantidad, total=int(total or 0))
        for fecha, cantidad, total in result.all()
    ]


async def stock_bajo(db: AsyncSession, umbral: int = UMBRAL_STOCK_BAJO) -> list[StockBajoItem]:
    """Productos con stock menor o igual al umbral, del más escaso al más abundante."""
    q = (
        select(Producto.sku, Producto.nombre, Producto.stock)
        .where(Producto.stock <= umbral)
        .order_by(Producto.stock, Producto.nombre)
    )
    result = await db.execute(q)
    return [StockBajoItem(sku=sku, nombre=nombre, stock=stock) for sku, nombre, stock in result.all()]


async def resumen_general(db: AsyncSession) -> dict:
    """Totales para el panel de administración."""
    total_ventas = (await db.execute(select(func.coalesce(func.sum(Venta.total), 0)))).scalar_one()
    cantidad_ventas = (await db.execute(select(func.count(Venta.id)))).scalar_one()
    productos = (await db.execute(select(func.count()).select_from(Producto))).scalar_one()
    usuarios_activos = (
        await db.execute(select(func.count()).select_from(Usuario).where(Usuario.activo.is_(True)))
    ).scalar_one()
    return {
        "total_ventas": int(total_ventas),
        "cantidad_ventas": cantidad_ventas,
        "productos": productos,
        "usuarios_activos": usuarios_activos,
    }
