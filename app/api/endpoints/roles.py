"""Endpoints de roles (tipos de usuario). Solo Administrador."""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.endpoints.auth import require_roles
from app.core.database import get_db
from app.core.politica import RolId
from app.models import Rol, Usuario
from app.schemas.catalogo import NombreIn, RolItem
from app.services.catalogo_service import contar_referencias, nombre_en_uso

router = APIRouter(prefix="/roles", tags=["roles"])


async def _obtener_rol(db: AsyncSession, rol_id: int) -> Rol:
    rol = await db.get(Rol, rol_id)
    if not rol:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Rol no encontrado",
        )
    return rol


async def _nombre_libre(db: AsyncSession, nombre: str, excluir_id: int | None = None) -> None:
    if await nombre_en_uso(db, Rol.nombre, nombre, Rol.id, excluir_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Ya existe un rol con ese nombre",
        )


@router.get("", response_model=list[RolItem], summary="Listar roles")
async def listar_roles(
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(RolId.ADMIN)),
):
    result = await db.execute(select(Rol).order_by(Rol.id))
    return [RolItem(id=r.id, nombre=r.nombre) for r in result.scalars().all()]


@router.get("/{rol_id}", response_model=RolItem, summary="Obtener rol")
async def obtener_rol(
    rol_id: int,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(RolId.ADMIN)),
):
    rol = await _obtener_rol(db, rol_id)
    return RolItem(id=rol.id, nombre=rol.nombre)


@router.post("", response_model=RolItem, status_code=status.HTTP_201_CREATED, summary="Crear rol")
async def crear_rol(
    body: NombreIn,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(RolId.ADMIN)),
):
    """Los roles nuevos no tienen rutas propias en la política: solo acceden a rutas sin restricción."""
    await _nombre_libre(db, body.nombre)
    rol = Rol(nombre=body.nombre)
    db.add(rol)
    await db.commit()
    return RolItem(id=rol.id, nombre=rol.nombre)


@router.put("/{rol_id}", response_model=RolItem, summary="Renombrar rol")
async def actualizar_rol(
    rol_id: int,
    body: NombreIn,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(RolId.ADMIN)),
):
    rol = await _obtener_rol(db, rol_id)
    await _nombre_libre(db, body.nombre, excluir_id=rol_id)
    rol.nombre = body.nombre
    await db.commit()
    return RolItem(id=rol.id, nombre=rol.nombre)


@router.delete("/{rol_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Eliminar rol")
async def eliminar_rol(
    rol_id: int,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(RolId.ADMIN)),
):
    """Elimina un rol sin usuarios. Los roles Administrador, Vendedor y Bodeguero no se eliminan."""
    await _obtener_rol(db, rol_id)
    if rol_id in set(RolId):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Los roles del sistema no se pueden eliminar",
        )
    if await contar_referencias(db, Usuario.rol_id, rol_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No se puede eliminar el rol porque tiene usuarios asociados",
        )
    await db.execute(delete(Rol).where(Rol.id == rol_id))
    await db.commit()
