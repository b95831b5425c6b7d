"""Modelo Cliente."""
from typing import TYPE_CHECKING

from sqlalchemy import Identity, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, BigId

if TYPE_CHECKING:
    from app.models.venta import Venta


class Cliente(Base):
    """Cliente al que se asocia opcionalmente una venta."""

    __tablename__ = "clientes"

    id: Mapped[int] = mapped_column(BigId, Identity(always=True), primary_key=True)
    nombre: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    telefono: Mapped[str] = mapped_column(Text, nullable=False)
    rut: Mapped[str | None] = mapped_column(Text, nullable=True)

    ventas: Mapped[list["Venta"]] = relationship("Venta", back_populates="cliente")
