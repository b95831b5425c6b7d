"""Esquemas para ventas."""
from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class DetalleIn(BaseModel):
    sku: str = Field(min_length=1, description="SKU del producto")
    cantidad: int = Field(gt=0, description="Unidades vendidas")


class PagoIn(BaseModel):
    monto_efectivo: int = Field(default=0, ge=0)
    monto_tarjeta: int = Field(default=0, ge=0)


class PagoUpdate(BaseModel):
    """Cambios al pago; los montos no enviados se conservan."""

    monto_efectivo: int | None = Field(default=None, ge=0)
    monto_tarjeta: int | None = Field(default=None, ge=0)


class DocumentoIn(BaseModel):
    id_tipo: str = Field(pattern=r"^\d{1,3}$", description="Código SII del tipo de documento (ej. 39)")


class VentaCreate(BaseModel):
    """Body para registrar una venta. Subtotales y total se calculan en el servidor."""

    fecha: datetime | None = Field(default=None, description="Fecha de la venta; por defecto, ahora")
    pago: PagoIn = Field(default_factory=PagoIn)
    detalles: list[DetalleIn] = Field(min_length=1, description="Al menos un detalle")
    documento: DocumentoIn | None = None
    id_cliente: int | None = Field(default=None, description="Cliente asociado (opcional)")

    @field_validator("detalles")
    @classmethod
    def skus_unicos(cls, v: list[DetalleIn]) -> list[DetalleIn]:
        skus = [d.sku for d in v]
        if len(skus) != len(set(skus)):
            raise ValueError("Cada SKU debe aparecer una sola vez en la venta")
        return v


class VentaUpdate(BaseModel):
    """Actualización parcial de una venta. Si vienen detalles, se reemplazan y se recalcula el total."""

    fecha: datetime | None = None
    pago: PagoUpdate | None = None
    detalles: list[DetalleIn] | None = Field(default=None, min_length=1)
    documento: DocumentoIn | None = None
    id_cliente: int | None = None

    @field_validator("detalles")
    @classmethod
    def skus_unicos(cls, v: list[DetalleIn] | None) -> list[DetalleIn] | None:
        if v is not None and len({d.sku for d in v}) != len(v):
            raise ValueError("Cada SKU debe aparecer una sola vez en la venta")
        return v


class DetalleItem(BaseModel):
    sku: str
    nombre: str
    cantidad: int
    subtotal: int


class PagoItem(BaseModel):
    monto_efectivo: int
    monto_tarjeta: int


class DocumentoItem(BaseModel):
    id_tipo: str
    nombre_tipo: str


class VentaItem(BaseModel):
    id: int
    fecha: datetime
    total: int
    vendedor_id: int | None
    cliente_id: int | None = None
    pago: PagoItem
    detalles: list[DetalleItem]
    documento: DocumentoItem | None = None


class VentaListResponse(BaseModel):
    ventas: list[VentaItem]
