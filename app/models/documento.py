"""Documentos tributarios (boleta, factura) asociados a una venta."""
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Identity, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, BigId

if TYPE_CHECKING:
    from app.models.venta import Venta


class TipoDocumento(Base):
    """Tipo de documento según código SII (ej. 33 Factura Electrónica, 39 Boleta Electrónica)."""

    __tablename__ = "tipos_documento"

    codigo_sii: Mapped[str] = mapped_column(Text, primary_key=True)
    nombre: Mapped[str] = mapped_column(Text, nullable=False)


class DocumentoTributario(Base):
    __tablename__ = "documentos_tributarios"

    id: Mapped[int] = mapped_column(BigId, Identity(always=True), primary_key=True)
    venta_id: Mapped[int] = mapped_column(
        BigId, ForeignKey("ventas.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    tipo_codigo: Mapped[str] = mapped_column(Text, ForeignKey("tipos_documento.codigo_sii"), nullable=False)

    venta: Mapped["Venta"] = relationship("Venta", back_populates="documento")
    tipo: Mapped["TipoDocumento"] = relationship("TipoDocumento")
