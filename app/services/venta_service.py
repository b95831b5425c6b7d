"""Servicio de ventas: cálculo de subtotales, stock y registro transaccional."""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models import Cliente, DetalleVenta, DocumentoTributario, Pago, Producto, TipoDocumento, Venta
from app.schemas.venta import DetalleIn, VentaCreate, VentaUpdate

logger = logging.getLogger(__name__)


class VentaError(Exception):
    """Error de negocio al registrar o modificar una venta."""


class ProductoNoEncontradoError(VentaError):
    def __init__(self, sku: str):
        super().__init__(f'Producto con SKU "{sku}" no encontrado')
        self.sku = sku


class StockInsuficienteError(VentaError):
    def __init__(self, sku: str, disponible: int, solicitado: int):
        super().__init__(
            f'Stock insuficiente para "{sku}": disponible {disponible}, solicitado {solicitado}'
        )
        self.sku = sku


class TipoDocumentoInvalidoError(VentaError):
    def __init__(self, codigo: str):
        super().__init__(f"Tipo de documento {codigo} no existe")


class ClienteNoEncontradoError(VentaError):
    def __init__(self, cliente_id: int):
        super().__init__(f"Cliente {cliente_id} no existe")


@dataclass
class LineaCalculada:
    producto: Producto
    cantidad: int
    subtotal: int


def opciones_venta():
    """Relaciones que se cargan siempre junto a una venta."""
    return (
        selectinload(Venta.pago),
        selectinload(Venta.detalles).selectinload(DetalleVenta.producto),
        selectinload(Venta.documento).selectinload(DocumentoTributario.tipo),
    )


async def obtener_venta(db: AsyncSession, venta_id: int) -> Venta | None:
    result = await db.execute(
        select(Venta)
        .options(*opciones_venta())
        .where(Venta.id == venta_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def calcular_lineas(db: AsyncSession, detalles: list[DetalleIn]) -> list[LineaCalculada]:
    """Obtiene los productos y calcula subtotal = precio_venta * cantidad, validando stock."""
    skus = [d.sku for d in detalles]
    result = await db.execute(select(Producto).where(Producto.sku.in_(skus)))
    productos = {p.sku: p for p in result.scalars().all()}

    lineas: list[LineaCalculada] = []
    for d in detalles:
        producto = productos.get(d.sku)
        if producto is None:
            raise ProductoNoEncontradoError(d.sku)
        if producto.stock < d.cantidad:
            raise StockInsuficienteError(d.sku, producto.stock, d.cantidad)
        lineas.append(LineaCalculada(producto, d.cantidad, producto.precio_venta * d.cantidad))
    return lineas


async def _obtener_tipo_documento(db: AsyncSession, codigo: str) -> TipoDocumento:
    r = await db.execute(select(TipoDocumento).where(TipoDocumento.codigo_sii == codigo))
    tipo = r.scalar_one_or_none()
    if tipo is None:
        raise TipoDocumentoInvalidoError(codigo)
    return tipo


async def _verificar_cliente(db: AsyncSession, cliente_id: int) -> None:
    if await db.get(Cliente, cliente_id) is None:
        raise ClienteNoEncontradoError(cliente_id)


def _aplicar_lineas(venta: Venta, lineas: list[LineaCalculada]) -> None:
    for linea in lineas:
        linea.producto.stock -= linea.cantidad
        venta.detalles.append(
            DetalleVenta(sku=linea.producto.sku, cantidad=linea.cantidad, subtotal=linea.subtotal)
        )
    venta.total = sum(linea.subtotal for linea in lineas)


def _devolver_stock(venta: Venta) -> None:
    for detalle in venta.detalles:
        detalle.producto.stock += detalle.cantidad


async def registrar_venta(db: AsyncSession, data: VentaCreate, vendedor_id: int | None) -> Venta:
    """Crea pago, venta, detalles y documento en la transacción de la sesión; descuenta stock."""
    lineas = await calcular_lineas(db, data.detalles)
    tipo = await _obtener_tipo_documento(db, data.documento.id_tipo) if data.documento else None
    if data.id_cliente is not None:
        await _verificar_cliente(db, data.id_cliente)

    pago = Pago(monto_efectivo=data.pago.monto_efectivo, monto_tarjeta=data.pago.monto_tarjeta)
    venta = Venta(
        fecha=data.fecha or datetime.now(timezone.utc),
        total=0,
        pago=pago,
        vendedor_id=vendedor_id,
        cliente_id=data.id_cliente,
        detalles=[],
    )
    _aplicar_lineas(venta, lineas)
    if tipo is not None:
        venta.documento = DocumentoTributario(tipo=tipo)

    db.add(venta)
    await db.flush()
    logger.info("Venta %s registrada: total %s, %s líneas", venta.id, venta.total, len(lineas))
    return venta


async def actualizar_venta(db: AsyncSession, venta: Venta, data: VentaUpdate) -> Venta:
    """Aplica los campos enviados. Si vienen detalles, se reemplazan y se recalcula el total."""
    if data.fecha is not None:
        venta.fecha = data.fecha
    if data.id_cliente is not None:
        await _verificar_cliente(db, data.id_cliente)
        venta.cliente_id = data.id_cliente
    if data.pago is not None:
        for campo, monto in data.pago.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(venta.pago, campo, monto)
    if data.documento is not None:
        tipo = await _obtener_tipo_documento(db, data.documento.id_tipo)
        if venta.documento:
            venta.documento.tipo = tipo
        else:
            venta.documento = DocumentoTributario(tipo=tipo)

    if data.detalles is not None:
        # Si el cálculo falla, el rollback de la sesión deshace la devolución
        _devolver_stock(venta)
        await db.flush()
        lineas = await calcular_lineas(db, data.detalles)
        venta.detalles.clear()
        await db.flush()
        _aplicar_lineas(venta, lineas)

    await db.flush()
    return venta


async def eliminar_venta(db: AsyncSession, venta: Venta) -> None:
    """Elimina la venta con sus detalles, documento y pago, devolviendo el stock."""
    _devolver_stock(venta)
    await db.flush()
    await db.execute(delete(DetalleVenta).where(DetalleVenta.venta_id == venta.id))
    await db.execute(delete(DocumentoTributario).where(DocumentoTributario.venta_id == venta.id))
    await db.execute(delete(Venta).where(Venta.id == venta.id))
    await db.execute(delete(Pago).where(Pago.id == venta.pago_id))
    logger.info("Venta %s eliminada", venta.id)
