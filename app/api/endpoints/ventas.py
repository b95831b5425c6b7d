"""Endpoints de ventas."""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.endpoints.auth import require_roles
from app.core.database import get_db
from app.core.politica import RolId
from app.models import Usuario, Venta
from app.schemas.venta import (
    DetalleItem,
    DocumentoItem,
    PagoItem,
    VentaCreate,
    VentaItem,
    VentaListResponse,
    VentaUpdate,
)
from app.services import venta_service
from app.services.venta_service import ProductoNoEncontradoError, StockInsuficienteError, VentaError

router = APIRouter(prefix="/ventas", tags=["ventas"])

ROLES_CAJA = (RolId.ADMIN, RolId.VENDEDOR)


def venta_a_item(v: Venta) -> VentaItem:
    return VentaItem(
        id=v.id,
        fecha=v.fecha,
        total=v.total,
        vendedor_id=v.vendedor_id,
        cliente_id=v.cliente_id,
        pago=PagoItem(monto_efectivo=v.pago.monto_efectivo, monto_tarjeta=v.pago.monto_tarjeta),
        detalles=[
            DetalleItem(sku=d.sku, nombre=d.producto.nombre, cantidad=d.cantidad, subtotal=d.subtotal)
            for d in v.detalles
        ],
        documento=(
            DocumentoItem(id_tipo=v.documento.tipo_codigo, nombre_tipo=v.documento.tipo.nombre)
            if v.documento
            else None
        ),
    )


def _error_venta(exc: VentaError) -> HTTPException:
    if isinstance(exc, ProductoNoEncontradoError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, StockInsuficienteError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


async def _obtener_venta(db: AsyncSession, venta_id: int) -> Venta:
    venta = await venta_service.obtener_venta(db, venta_id)
    if not venta:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Venta no encontrada",
        )
    return venta


@router.get("", response_model=VentaListResponse, summary="Listar ventas")
async def listar_ventas(
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(*ROLES_CAJA)),
):
    """Ventas con pago, detalles y documento, de la más reciente a la más antigua."""
    result = await db.execute(
        select(Venta).options(*venta_service.opciones_venta()).order_by(Venta.id.desc())
    )
    return VentaListResponse(ventas=[venta_a_item(v) for v in result.scalars().all()])


@router.get("/{venta_id}", response_model=VentaItem, summary="Obtener venta")
async def obtener_venta(
    venta_id: int,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(*ROLES_CAJA)),
):
    return venta_a_item(await _obtener_venta(db, venta_id))


@router.post(
    "",
    response_model=VentaItem,
    status_code=status.HTTP_201_CREATED,
    summary="Registrar venta",
    responses={
        201: {"description": "Venta registrada"},
        404: {"description": "Algún SKU no existe"},
        409: {"description": "Stock insuficiente"},
    },
)
async def crear_venta(
    body: VentaCreate,
    db: AsyncSession = Depends(get_db),
    current_user: Usuario = Depends(require_roles(*ROLES_CAJA)),
):
    """
    Registra la venta en una sola transacción. Los subtotales se calculan con el precio de venta
    de cada producto y se descuenta el stock.
    """
    try:
        venta = await venta_service.registrar_venta(db, body, vendedor_id=current_user.id)
    except VentaError as exc:
        raise _error_venta(exc) from exc
    await db.commit()
    return venta_a_item(await _obtener_venta(db, venta.id))


@router.put("/{venta_id}", response_model=VentaItem, summary="Actualizar venta")
async def actualizar_venta(
    venta_id: int,
    body: VentaUpdate,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(RolId.ADMIN)),
):
    venta = await _obtener_venta(db, venta_id)
    try:
        await venta_service.actualizar_venta(db, venta, body)
    except VentaError as exc:
        raise _error_venta(exc) from exc
    await db.commit()
    return venta_a_item(await _obtener_venta(db, venta_id))


@router.delete("/{venta_id}", summary="Eliminar venta")
async def eliminar_venta(
    venta_id: int,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(RolId.ADMIN)),
):
    """Elimina la venta con sus registros asociados y devuelve el stock."""
    venta = await _obtener_venta(db, venta_id)
    await venta_service.eliminar_venta(db, venta)
    await db.commit()
    return {"message": "Venta eliminada exitosamente"}
