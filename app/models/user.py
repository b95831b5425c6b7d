"""Modelo Usuario."""
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Identity, Text, true
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, BigId

if TYPE_CHECKING:
    from app.models.role import Rol
    from app.models.venta import Venta


class Usuario(Base):
    """Usuario del sistema (administradores, vendedores, bodegueros)."""

    __tablename__ = "usuarios"

    id: Mapped[int] = mapped_column(BigId, Identity(always=True), primary_key=True)
    nombre: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    password_hash: Mapped[str | None] = mapped_column(Text, nullable=True)
    rol_id: Mapped[int] = mapped_column(BigId, ForeignKey("roles.id"), nullable=False)
    activo: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())

    rol: Mapped["Rol"] = relationship("Rol", back_populates="usuarios")
    ventas: Mapped[list["Venta"]] = relationship("Venta", back_populates="vendedor")

    @property
    def estado(self) -> str:
        return "Activo" if self.activo else "Inactivo"
