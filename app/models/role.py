"""Modelo Rol (tipo de usuario)."""
from typing import TYPE_CHECKING

from sqlalchemy import Identity, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, BigId

if TYPE_CHECKING:
    from app.models.user import Usuario


class Rol(Base):
    """Rol del usuario: Administrador (1), Vendedor (2), Bodeguero (3)."""

    __tablename__ = "roles"

    # Los ids 1 a 3 (RolId) se insertan explícitamente al sembrar
    id: Mapped[int] = mapped_column(BigId, Identity(always=False, start=4), primary_key=True)
    nombre: Mapped[str] = mapped_column(Text, nullable=False, unique=True)

    usuarios: Mapped[list["Usuario"]] = relationship("Usuario", back_populates="rol")
