"""Endpoints de autenticación: login, checkActivo y dependencias para proteger rutas."""
import logging
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import Settings
from app.core.database import get_db
from app.core.middleware import sesion_de_request
from app.core.politica import PoliticaRutas
from app.core.security import verify_password
from app.core.sesion import emitir_sesion
from app.models import Usuario
from app.schemas.auth import CheckActivoResponse, LoginRequest, LoginResponse
from app.schemas.usuario import UsuarioItem

logger = logging.getLogger(__name__)

# Mismo mensaje para usuario inexistente, contraseña incorrecta o cuenta inactiva
CREDENCIALES_INVALIDAS = "Credenciales inválidas"

router = APIRouter(prefix="/auth", tags=["auth"])


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_politica(request: Request) -> PoliticaRutas:
    return request.app.state.politica


def usuario_a_item(usuario: Usuario) -> UsuarioItem:
    return UsuarioItem(
        id=usuario.id,
        nombre=usuario.nombre,
        email=usuario.email,
        id_tipo=usuario.rol_id,
        rol=usuario.rol.nombre if usuario.rol else "",
        activo=usuario.activo,
        estado=usuario.estado,
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Iniciar sesión",
    response_description="Token de sesión para usar en el header Authorization o en la cookie",
    responses={
        200: {"description": "Login correcto"},
        401: {"description": "Credenciales inválidas"},
    },
)
async def login(
    data: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Autenticación con **correo** y **contraseña**.
    Devuelve `{id, email, role, token}` y deja el token en la cookie de sesión.
    """
    result = await db.execute(select(Usuario).where(Usuario.email == data.email))
    usuario = result.scalar_one_or_none()
    if (
        usuario is None
        or not verify_password(data.password, usuario.password_hash or "")
        or not usuario.activo
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=CREDENCIALES_INVALIDAS,
        )

    sesion = emitir_sesion(settings, usuario.id, usuario.rol_id, usuario.email, usuario.activo)
    response.set_cookie(
        settings.session_cookie_name,
        sesion.access_token,
        max_age=settings.jwt_expire_minutes * 60,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )
    logger.info("Inicio de sesión de usuario %s", usuario.id)
    return LoginResponse(id=usuario.id, email=usuario.email, role=usuario.rol_id, token=sesion.access_token)


@router.post("/logout", summary="Cerrar sesión")
async def logout(response: Response, settings: Settings = Depends(get_settings)):
    """Elimina la cookie de sesión."""
    response.delete_cookie(settings.session_cookie_name, path="/")
    return {"message": "Sesión cerrada"}


@router.get(
    "/checkActivo",
    response_model=CheckActivoResponse,
    summary="Verificar si la cuenta sigue activa",
    responses={
        200: {"description": "Estado actual de la cuenta"},
        401: {"description": "Sin sesión o token inválido"},
        404: {"description": "El usuario del token ya no existe"},
        500: {"description": "Error interno"},
    },
)
async def check_activo(
    request: Request,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    politica: PoliticaRutas = Depends(get_politica),
):
    """
    Consulta en base de datos el estado `activo` del usuario del token.
    Si se envía el header `x-pathname`, `canAccess` indica si su rol actual puede entrar a esa ruta.
    """
    sesion = sesion_de_request(request, settings)
    if sesion is None:
        return JSONResponse({"error": "not_authenticated"}, status_code=status.HTTP_401_UNAUTHORIZED)

    try:
        result = await db.execute(select(Usuario).where(Usuario.id == sesion.id))
        usuario = result.scalar_one_or_none()
    except SQLAlchemyError:
        logger.exception("Error consultando estado del usuario %s", sesion.id)
        return JSONResponse({"error": "server_error"}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if usuario is None:
        return JSONResponse({"error": "not_found"}, status_code=status.HTTP_404_NOT_FOUND)

    ruta = request.headers.get("x-pathname") or "/"
    # El rol puede haber cambiado desde que se emitió el token
    sesion_actual = sesion.model_copy(update={"role": usuario.rol_id, "activo": usuario.activo})
    puede = usuario.activo and politica.decidir(ruta, sesion_actual).permitido
    return CheckActivoResponse(activo=usuario.activo, id=usuario.id, role=usuario.rol_id, can_access=puede)


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> Usuario:
    """Dependencia: exige un token válido y una cuenta activa; devuelve el usuario actual."""
    sesion = sesion_de_request(request, settings)
    if sesion is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token de autenticación no proporcionado o inválido",
            headers={"WWW-Authenticate": "Bearer"},
        )
    result = await db.execute(
        select(Usuario).options(selectinload(Usuario.rol)).where(Usuario.id == sesion.id)
    )
    usuario = result.scalar_one_or_none()
    if not usuario:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Usuario no encontrado",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not usuario.activo:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Usuario inactivo. Contacte al administrador.",
        )
    return usuario


def require_roles(*roles: int) -> Callable:
    """Dependencia que exige que el rol del usuario actual esté entre los indicados."""

    async def _check(current_user: Usuario = Depends(get_current_user)) -> Usuario:
        if current_user.rol_id not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="No tiene permisos para esta operación",
            )
        return current_user

    return _check


@router.get("/me", response_model=UsuarioItem, summary="Usuario actual")
async def get_me(current_user: Usuario = Depends(get_current_user)):
    """Datos del usuario autenticado. **Requiere:** token de sesión."""
    return usuario_a_item(current_user)
