"""Esquemas para gestión de usuarios."""
from typing import Annotated

from pydantic import AfterValidator, BaseModel, EmailStr, Field


def _nombre_no_vacio(valor: str) -> str:
    limpio = valor.strip()
    if not limpio:
        raise ValueError("El nombre no puede estar vacío")
    return limpio


NombrePersona = Annotated[str, AfterValidator(_nombre_no_vacio)]


class UsuarioCreate(BaseModel):
    """Body para crear un usuario. Se crea activo; rol por defecto Vendedor."""

    nombre: NombrePersona = Field(description="Nombre del usuario")
    email: EmailStr = Field(description="Correo electrónico (único)")
    password: str = Field(description="Contraseña en texto", min_length=6)
    id_tipo: int = Field(default=2, description="ID del rol (1 Admin, 2 Vendedor, 3 Bodeguero)")


class UsuarioUpdate(BaseModel):
    """Body para actualizar un usuario. Solo se modifican los campos enviados."""

    nombre: NombrePersona | None = Field(default=None, description="Nombre del usuario")
    email: EmailStr | None = Field(default=None, description="Correo electrónico (único)")
    password: str | None = Field(default=None, min_length=6, description="Nueva contraseña; se guarda hasheada")
    id_tipo: int | None = Field(default=None, description="ID del rol")
    activo: bool | None = Field(default=None, description="False desactiva la cuenta")


class UsuarioItem(BaseModel):
    """Usuario sin datos sensibles."""

    id: int
    nombre: str
    email: str
    id_tipo: int = Field(description="ID del rol")
    rol: str = Field(description="Nombre del rol")
    activo: bool
    estado: str = Field(description="Activo o Inactivo")


class UsuarioListResponse(BaseModel):
    usuarios: list[UsuarioItem]
