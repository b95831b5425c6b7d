"""Token de sesión: esquema versionado, firma y verificación JWT.

La misma clase se usa al emitir el token (login) y al verificarlo
(middleware, dependencias y checkActivo), de modo que ambos lados
comparten los nombres y tipos de los claims.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app.core.config import Settings

logger = logging.getLogger(__name__)

SESSION_SCHEMA_VERSION = 1


class SessionToken(BaseModel):
    """Contenido del token de sesión: {id, role, accessToken, activo}."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    v: int = Field(default=SESSION_SCHEMA_VERSION, description="Versión del esquema de sesión")
    id: int = Field(alias="sub", description="ID del usuario")
    role: int = Field(description="Rol numérico: 1 Admin, 2 Vendedor, 3 Bodeguero")
    email: str | None = None
    activo: bool = True
    access_token: str | None = Field(default=None, exclude=True, description="Token codificado tal como se recibió")

    def claims(self) -> dict[str, Any]:
        """Claims a firmar; el id viaja como ``sub`` en texto, como exige JWT."""
        return {"sub": str(self.id), **self.model_dump(exclude={"id", "access_token"})}


def firmar_claims(settings: Settings, claims: dict[str, Any]) -> str:
    """Firma los claims agregando ``iat`` y ``exp`` según ``jwt_expire_minutes``."""
    ahora = datetime.now(timezone.utc)
    payload = {**claims, "iat": ahora, "exp": ahora + timedelta(minutes=settings.jwt_expire_minutes)}
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decodificar_claims(settings: Settings, token: str) -> dict[str, Any] | None:
    """Payload del JWT si la firma y la expiración son válidas; None en otro caso."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError as exc:
        logger.debug("Token rechazado: %s", exc)
        return None


def emitir_sesion(settings: Settings, usuario_id: int, role: int, email: str | None, activo: bool = True) -> SessionToken:
    """Firma un token de sesión nuevo para el usuario."""
    sesion = SessionToken(id=usuario_id, role=role, email=email, activo=activo)
    return sesion.model_copy(update={"access_token": firmar_claims(settings, sesion.claims())})


def leer_sesion(settings: Settings, token: str | None) -> SessionToken | None:
    """Decodifica y valida el token; None si falta, es inválido o de otra versión."""
    if not token:
        return None
    payload = decodificar_claims(settings, token)
    if payload is None:
        return None
    if payload.get("v") != SESSION_SCHEMA_VERSION:
        logger.debug("Token con versión de esquema no soportada: %r", payload.get("v"))
        return None
    # role debe ser entero: no se aceptan "1" ni 1.0
    if type(payload.get("role")) is not int:
        return None
    try:
        sesion = SessionToken.model_validate(payload)
    except ValidationError:
        logger.debug("Token de sesión con claims inválidos")
        return None
    return sesion.model_copy(update={"access_token": token})
