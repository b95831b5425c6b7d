"""Endpoints de marcas."""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.endpoints.auth import get_current_user, require_roles
from app.core.database import get_db
from app.core.politica import RolId
from app.models import Marca, Producto, Usuario
from app.schemas.catalogo import MarcaItem, NombreIn
from app.services.catalogo_service import contar_referencias, filtrar_por_texto, nombre_en_uso

router = APIRouter(prefix="/marcas", tags=["marcas"])

ROLES_ESCRITURA = (RolId.ADMIN, RolId.BODEGUERO)


async def _obtener_marca(db: AsyncSession, marca_id: int) -> Marca:
    marca = await db.get(Marca, marca_id)
    if not marca:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="La marca especificada no existe",
        )
    return marca


async def _nombre_libre(db: AsyncSession, nombre: str, excluir_id: int | None = None) -> None:
    if await nombre_en_uso(db, Marca.nombre, nombre, Marca.id, excluir_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Ya existe una marca con ese nombre",
        )


@router.get("", response_model=list[MarcaItem], summary="Listar marcas")
async def listar_marcas(
    search: str | None = Query(default=None, description="Filtra por nombre (sin distinguir mayúsculas)"),
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(get_current_user),
):
    q = filtrar_por_texto(select(Marca).order_by(Marca.nombre), search, Marca.nombre)
    return [MarcaItem(id=m.id, nombre=m.nombre) for m in (await db.execute(q)).scalars().all()]


@router.get("/{marca_id}", response_model=MarcaItem, summary="Obtener marca")
async def obtener_marca(
    marca_id: int,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(get_current_user),
):
    marca = await _obtener_marca(db, marca_id)
    return MarcaItem(id=marca.id, nombre=marca.nombre)


@router.post("", response_model=MarcaItem, status_code=status.HTTP_201_CREATED, summary="Crear marca")
async def crear_marca(
    body: NombreIn,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(*ROLES_ESCRITURA)),
):
    await _nombre_libre(db, body.nombre)
    marca = Marca(nombre=body.nombre)
    db.add(marca)
    await db.commit()
    return MarcaItem(id=marca.id, nombre=marca.nombre)


@router.put("/{marca_id}", response_model=MarcaItem, summary="Renombrar marca")
async def actualizar_marca(
    marca_id: int,
    body: NombreIn,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(*ROLES_ESCRITURA)),
):
    marca = await _obtener_marca(db, marca_id)
    await _nombre_libre(db, body.nombre, excluir_id=marca_id)
    marca.nombre = body.nombre
    await db.commit()
    return MarcaItem(id=marca.id, nombre=marca.nombre)


@router.delete("/{marca_id}", summary="Eliminar marca")
async def eliminar_marca(
    marca_id: int,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(*ROLES_ESCRITURA)),
):
    """Elimina la marca. 409 si tiene productos asociados."""
    await _obtener_marca(db, marca_id)
    asociados = await contar_referencias(db, Producto.marca_id, marca_id)
    if asociados:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"No se puede eliminar la marca porque tiene {asociados} productos asociados",
        )
    await db.execute(delete(Marca).where(Marca.id == marca_id))
    await db.commit()
    return {"message": "Marca eliminada exitosamente"}
