"""Esquemas para clientes."""
import re
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, EmailStr, Field

from app.schemas.usuario import NombrePersona

PATRON_TELEFONO = re.compile(r"^\+?\d{6,15}$")


def _normalizar_telefono(valor):
    """Acepta número o texto; quita espacios y guiones y exige solo dígitos."""
    if isinstance(valor, bool) or not isinstance(valor, (int, str)):
        raise ValueError("El teléfono debe ser un número")
    limpio = re.sub(r"[\s-]", "", str(valor))
    if not PATRON_TELEFONO.match(limpio):
        raise ValueError("El teléfono debe ser un número de 6 a 15 dígitos")
    return limpio


Telefono = Annotated[str, BeforeValidator(_normalizar_telefono)]


class ClienteCreate(BaseModel):
    nombre: NombrePersona = Field(description="Nombre completo")
    email: EmailStr = Field(description="Correo electrónico (único)")
    telefono: Telefono = Field(description="Teléfono, solo dígitos (se admite + inicial)")
    rut: str | None = Field(default=None, description="RUT del cliente, si se conoce")


class ClienteUpdate(BaseModel):
    """Actualización parcial: solo se modifican los campos enviados."""

    nombre: NombrePersona | None = None
    email: EmailStr | None = None
    telefono: Telefono | None = None
    rut: str | None = None


class ClienteEmailIn(BaseModel):
    email: EmailStr


class ClienteItem(BaseModel):
    id: int
    nombre: str
    email: str
    telefono: str
    rut: str | None
