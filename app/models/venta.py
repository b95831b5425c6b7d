"""Modelos de venta: Venta, DetalleVenta y Pago."""
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Identity, Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, BigId

if TYPE_CHECKING:
    from app.models.cliente import Cliente
    from app.models.documento import DocumentoTributario
    from app.models.producto import Producto
    from app.models.user import Usuario


def _ahora() -> datetime:
    return datetime.now(timezone.utc)


class Pago(Base):
    """Desglose del pago de una venta."""

    __tablename__ = "pagos"

    id: Mapped[int] = mapped_column(BigId, Identity(always=True), primary_key=True)
    monto_efectivo: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=text("0"))
    monto_tarjeta: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=text("0"))

    venta: Mapped["Venta"] = relationship("Venta", back_populates="pago", uselist=False)


class Venta(Base):
    """Venta registrada en caja."""

    __tablename__ = "ventas"

    id: Mapped[int] = mapped_column(BigId, Identity(always=True), primary_key=True)
    fecha: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_ahora)
    total: Mapped[int] = mapped_column(Integer, nullable=False)
    pago_id: Mapped[int] = mapped_column(BigId, ForeignKey("pagos.id"), nullable=False, unique=True)
    vendedor_id: Mapped[int | None] = mapped_column(BigId, ForeignKey("usuarios.id"), nullable=True)
    cliente_id: Mapped[int | None] = mapped_column(BigId, ForeignKey("clientes.id"), nullable=True)

    pago: Mapped["Pago"] = relationship("Pago", back_populates="venta")
    vendedor: Mapped[Optional["Usuario"]] = relationship("Usuario", back_populates="ventas")
    cliente: Mapped[Optional["Cliente"]] = relationship("Cliente", back_populates="ventas")
    detalles: Mapped[list["DetalleVenta"]] = relationship(
        "DetalleVenta", back_populates="venta", cascade="all, delete-orphan"
    )
    documento: Mapped[Optional["DocumentoTributario"]] = relationship(
        "DocumentoTributario", back_populates="venta", uselist=False, cascade="all, delete-orphan"
    )


class DetalleVenta(Base):
    """Línea de una venta: producto, cantidad y subtotal."""

    __tablename__ = "detalle_venta"

    venta_id: Mapped[int] = mapped_column(
        BigId, ForeignKey("ventas.id", ondelete="CASCADE"), primary_key=True
    )
    sku: Mapped[str] = mapped_column(Text, ForeignKey("productos.sku", onupdate="CASCADE"), primary_key=True)
    cantidad: Mapped[int] = mapped_column(Integer, nullable=False)
    subtotal: Mapped[int] = mapped_column(Integer, nullable=False)

    venta: Mapped["Venta"] = relationship("Venta", back_populates="detalles")
    producto: Mapped["Producto"] = relationship("Producto")
