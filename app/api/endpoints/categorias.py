"""Endpoints de categorías de producto."""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.endpoints.auth import get_current_user, require_roles
from app.core.database import get_db
from app.core.politica import RolId
from app.models import Categoria, Producto, Usuario
from app.schemas.catalogo import CategoriaItem, CategoriaListItem, NombreIn
from app.services.catalogo_service import contar_referencias, filtrar_por_texto, nombre_en_uso

router = APIRouter(prefix="/categorias", tags=["categorias"])

ROLES_ESCRITURA = (RolId.ADMIN, RolId.BODEGUERO)


async def _obtener_categoria(db: AsyncSession, categoria_id: int) -> Categoria:
    categoria = await db.get(Categoria, categoria_id)
    if not categoria:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="La categoría especificada no existe",
        )
    return categoria


@router.get("", response_model=list[CategoriaListItem], summary="Listar categorías")
async def listar_categorias(
    search: str | None = Query(default=None, description="Filtra por nombre (sin distinguir mayúsculas)"),
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(get_current_user),
):
    """Categorías ordenadas por nombre, con la cantidad de productos de cada una."""
    q = (
        select(Categoria.id, Categoria.nombre, func.count(Producto.sku))
        .outerjoin(Producto, Producto.categoria_id == Categoria.id)
        .group_by(Categoria.id, Categoria.nombre)
        .order_by(Categoria.nombre)
    )
    q = filtrar_por_texto(q, search, Categoria.nombre)
    return [
        CategoriaListItem(id=cid, nombre=nombre, cantidad_productos=cantidad)
        for cid, nombre, cantidad in (await db.execute(q)).all()
    ]


@router.get("/{categoria_id}", response_model=CategoriaItem, summary="Obtener categoría")
async def obtener_categoria(
    categoria_id: int,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(get_current_user),
):
    categoria = await _obtener_categoria(db, categoria_id)
    return CategoriaItem(id=categoria.id, nombre=categoria.nombre)


@router.post("", response_model=CategoriaItem, status_code=status.HTTP_201_CREATED, summary="Crear categoría")
async def crear_categoria(
    body: NombreIn,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(*ROLES_ESCRITURA)),
):
    if await nombre_en_uso(db, Categoria.nombre, body.nombre):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Ya existe una categoría con ese nombre",
        )
    categoria = Categoria(nombre=body.nombre)
    db.add(categoria)
    await db.commit()
    return CategoriaItem(id=categoria.id, nombre=categoria.nombre)


@router.put("/{categoria_id}", response_model=CategoriaItem, summary="Renombrar categoría")
async def actualizar_categoria(
    categoria_id: int,
    body: NombreIn,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(*ROLES_ESCRITURA)),
):
    categoria = await _obtener_categoria(db, categoria_id)
    if await nombre_en_uso(db, Categoria.nombre, body.nombre, Categoria.id, categoria_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Ya existe una categoría con ese nombre",
        )
    categoria.nombre = body.nombre
    await db.commit()
    return CategoriaItem(id=categoria.id, nombre=categoria.nombre)


@router.delete("/{categoria_id}", summary="Eliminar categoría")
async def eliminar_categoria(
    categoria_id: int,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(*ROLES_ESCRITURA)),
):
    """Elimina la categoría. 409 si tiene productos asociados."""
    await _obtener_categoria(db, categoria_id)
    asociados = await contar_referencias(db, Producto.categoria_id, categoria_id)
    if asociados:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"No se puede eliminar la categoría porque tiene {asociados} productos asociados",
        )
    await db.execute(delete(Categoria).where(Categoria.id == categoria_id))
    await db.commit()
    return {"message": "Categoría eliminada exitosamente"}
