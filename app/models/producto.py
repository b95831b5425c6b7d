"""Modelo Producto (identificado por SKU)."""
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, BigId

if TYPE_CHECKING:
    from app.models.categoria import Categoria
    from app.models.marca import Marca


class Producto(Base):
    """Producto del inventario. Precios en pesos enteros."""

    __tablename__ = "productos"
    __table_args__ = (
        CheckConstraint("precio_venta >= 0", name="ck_productos_precio_venta"),
        CheckConstraint("precio_compra >= 0", name="ck_productos_precio_compra"),
        CheckConstraint("stock >= 0", name="ck_productos_stock"),
    )

    sku: Mapped[str] = mapped_column(Text, primary_key=True)
    gtin: Mapped[str | None] = mapped_column(Text, nullable=True)
    nombre: Mapped[str] = mapped_column(Text, nullable=False)
    categoria_id: Mapped[int] = mapped_column(BigId, ForeignKey("categorias.id"), nullable=False)
    marca_id: Mapped[int] = mapped_column(BigId, ForeignKey("marcas.id"), nullable=False)
    precio_venta: Mapped[int] = mapped_column(Integer, nullable=False)
    precio_compra: Mapped[int] = mapped_column(Integer, nullable=False)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=text("0"))

    categoria: Mapped["Categoria"] = relationship("Categoria", back_populates="productos")
    marca: Mapped["Marca"] = relationship("Marca", back_populates="productos")
