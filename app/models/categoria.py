"""Modelo Categoria (tipo de categoría de producto)."""
from typing import TYPE_CHECKING

from sqlalchemy import Identity, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, BigId

if TYPE_CHECKING:
    from app.models.producto import Producto


class Categoria(Base):
    __tablename__ = "categorias"

    id: Mapped[int] = mapped_column(BigId, Identity(always=True), primary_key=True)
    nombre: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    productos: Mapped[list["Producto"]] = relationship("Producto", back_populates="categoria")
