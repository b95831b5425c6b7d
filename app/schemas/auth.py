"""Esquemas para autenticación y verificación de sesión."""
from pydantic import BaseModel, ConfigDict, EmailStr, Field


class LoginRequest(BaseModel):
    """Body del endpoint de login."""

    email: EmailStr = Field(description="Correo electrónico del usuario", examples=["admin@admin.cl"])
    password: str = Field(description="Contraseña en texto plano", min_length=1, examples=["admin123"])


class LoginResponse(BaseModel):
    """Respuesta del login: datos mínimos del usuario y token de sesión."""

    id: int = Field(description="ID del usuario")
    email: str = Field(description="Correo del usuario")
    role: int = Field(description="Rol numérico: 1 Admin, 2 Vendedor, 3 Bodeguero")
    token: str = Field(description="JWT para enviar en Authorization: Bearer <token>")


class CheckActivoResponse(BaseModel):
    """Estado de la cuenta asociada al token actual."""

    model_config = ConfigDict(populate_by_name=True)

    activo: bool = Field(description="False si la cuenta fue desactivada")
    id: int = Field(description="ID del usuario")
    role: int = Field(description="Rol numérico actual en base de datos")
    can_access: bool = Field(
        alias="canAccess",
        serialization_alias="canAccess",
        description="Si el rol puede acceder a la ruta enviada en el header x-pathname",
    )
