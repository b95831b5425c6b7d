"""Endpoints para gestión de usuarios. Solo Administrador."""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.api.endpoints.auth import get_settings, require_roles, usuario_a_item
from app.core.config import Settings
from app.core.database import get_db
from app.core.politica import RolId
from app.core.security import hash_password
from app.models import Rol, Usuario, Venta
from app.schemas.usuario import UsuarioCreate, UsuarioItem, UsuarioListResponse, UsuarioUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/usuarios", tags=["usuarios"])


async def _obtener_usuario(db: AsyncSession, usuario_id: int) -> Usuario:
    r = await db.execute(
        select(Usuario)
        .options(selectinload(Usuario.rol))
        .where(Usuario.id == usuario_id)
        .execution_options(populate_existing=True)
    )
    usuario = r.scalar_one_or_none()
    if not usuario:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Usuario no encontrado",
        )
    return usuario


async def _obtener_rol(db: AsyncSession, rol_id: int) -> Rol:
    r_rol = await db.execute(select(Rol).where(Rol.id == rol_id))
    rol = r_rol.scalar_one_or_none()
    if not rol:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="El rol indicado no existe",
        )
    return rol


@router.get(
    "",
    response_model=UsuarioListResponse,
    summary="Listar usuarios",
    description="Lista todos los usuarios (sin contraseña), ordenados por ID.",
)
async def listar_usuarios(
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(RolId.ADMIN)),
):
    result = await db.execute(
        select(Usuario).options(selectinload(Usuario.rol)).order_by(Usuario.id)
    )
    usuarios = result.scalars().all()
    return UsuarioListResponse(usuarios=[usuario_a_item(u) for u in usuarios])


@router.get("/{usuario_id}", response_model=UsuarioItem, summary="Obtener usuario")
async def obtener_usuario(
    usuario_id: int,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(RolId.ADMIN)),
):
    return usuario_a_item(await _obtener_usuario(db, usuario_id))


@router.post(
    "",
    response_model=UsuarioItem,
    status_code=status.HTTP_201_CREATED,
    summary="Crear usuario",
    description="Crea un usuario activo. Rol por defecto: Vendedor. 409 si el correo ya está registrado.",
)
async def crear_usuario(
    body: UsuarioCreate,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    _: Usuario = Depends(require_roles(RolId.ADMIN)),
):
    r = await db.execute(select(Usuario).where(Usuario.email == body.email))
    if r.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="El correo ya está registrado",
        )
    await _obtener_rol(db, body.id_tipo)

    usuario = Usuario(
        nombre=body.nombre,
        email=body.email,
        password_hash=hash_password(body.password, settings.bcrypt_rounds),
        rol_id=body.id_tipo,
        activo=True,
    )
    db.add(usuario)
    await db.commit()
    logger.info("Usuario creado: %s (rol %s)", usuario.id, usuario.rol_id)
    return usuario_a_item(await _obtener_usuario(db, usuario.id))


@router.patch(
    "/{usuario_id}",
    response_model=UsuarioItem,
    summary="Actualizar usuario",
    description="Actualiza nombre, correo, contraseña, rol y/o estado activo. Solo los campos enviados se modifican.",
)
async def actualizar_usuario(
    usuario_id: int,
    body: UsuarioUpdate,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    current_user: Usuario = Depends(require_roles(RolId.ADMIN)),
):
    usuario = await _obtener_usuario(db, usuario_id)

    if body.email is not None and body.email != usuario.email:
        otro = await db.execute(select(Usuario).where(Usuario.email == body.email, Usuario.id != usuario_id))
        if otro.scalar_one_or_none():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Este correo ya está en uso por otro usuario",
            )
        usuario.email = body.email
    if body.nombre is not None:
        usuario.nombre = body.nombre
    if body.password:
        usuario.password_hash = hash_password(body.password, settings.bcrypt_rounds)
    if body.id_tipo is not None:
        if usuario.id == current_user.id and body.id_tipo != RolId.ADMIN:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No puede quitarse a sí mismo el rol de Administrador",
            )
        usuario.rol = await _obtener_rol(db, body.id_tipo)
    if body.activo is not None:
        if not body.activo and usuario.id == current_user.id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No puede desactivar su propia cuenta",
            )
        usuario.activo = body.activo

    await db.commit()
    return usuario_a_item(await _obtener_usuario(db, usuario_id))


@router.delete("/{usuario_id}", summary="Eliminar usuario")
async def eliminar_usuario(
    usuario_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Usuario = Depends(require_roles(RolId.ADMIN)),
):
    """Elimina el usuario. 409 si tiene ventas asociadas."""
    usuario = await _obtener_usuario(db, usuario_id)
    if usuario.id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No puede eliminar su propia cuenta",
        )
    r_ventas = await db.execute(select(func.count()).select_from(Venta).where(Venta.vendedor_id == usuario_id))
    if r_ventas.scalar_one() > 0:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No se puede eliminar el usuario porque tiene registros asociados.",
        )
    await db.execute(delete(Usuario).where(Usuario.id == usuario_id))
    await db.commit()
    return {"message": "Usuario eliminado correctamente"}
