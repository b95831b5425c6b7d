"""Endpoints de tipos de documento tributario (códigos SII)."""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.endpoints.auth import get_current_user, require_roles
from app.core.database import get_db
from app.core.politica import RolId
from app.models import DocumentoTributario, TipoDocumento, Usuario
from app.schemas.catalogo import TipoDocumentoIn, TipoDocumentoItem, TipoDocumentoUpdate
from app.services.catalogo_service import contar_referencias

router = APIRouter(prefix="/tipos-documento", tags=["tipos-documento"])


async def _obtener_tipo(db: AsyncSession, codigo: str) -> TipoDocumento:
    tipo = await db.get(TipoDocumento, codigo)
    if not tipo:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Tipo de documento no encontrado",
        )
    return tipo


@router.get("", response_model=list[TipoDocumentoItem], summary="Listar tipos de documento")
async def listar_tipos(
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(get_current_user),
):
    result = await db.execute(select(TipoDocumento).order_by(TipoDocumento.nombre))
    return [TipoDocumentoItem(codigo_sii=t.codigo_sii, nombre=t.nombre) for t in result.scalars().all()]


@router.get("/{codigo_sii}", response_model=TipoDocumentoItem, summary="Obtener tipo de documento")
async def obtener_tipo(
    codigo_sii: str,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(get_current_user),
):
    tipo = await _obtener_tipo(db, codigo_sii)
    return TipoDocumentoItem(codigo_sii=tipo.codigo_sii, nombre=tipo.nombre)


@router.post(
    "",
    response_model=TipoDocumentoItem,
    status_code=status.HTTP_201_CREATED,
    summary="Crear tipo de documento",
    responses={409: {"description": "Código SII ya registrado"}},
)
async def crear_tipo(
    body: TipoDocumentoIn,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(RolId.ADMIN)),
):
    if await db.get(TipoDocumento, body.codigo_sii):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Ya existe un tipo de documento tributario con ese código SII",
        )
    tipo = TipoDocumento(codigo_sii=body.codigo_sii, nombre=body.nombre)
    db.add(tipo)
    await db.commit()
    return TipoDocumentoItem(codigo_sii=tipo.codigo_sii, nombre=tipo.nombre)


@router.put("/{codigo_sii}", response_model=TipoDocumentoItem, summary="Renombrar tipo de documento")
async def actualizar_tipo(
    codigo_sii: str,
    body: TipoDocumentoUpdate,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(RolId.ADMIN)),
):
    tipo = await _obtener_tipo(db, codigo_sii)
    tipo.nombre = body.nombre
    await db.commit()
    return TipoDocumentoItem(codigo_sii=tipo.codigo_sii, nombre=tipo.nombre)


@router.delete("/{codigo_sii}", status_code=status.HTTP_204_NO_CONTENT, summary="Eliminar tipo de documento")
async def eliminar_tipo(
    codigo_sii: str,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(RolId.ADMIN)),
):
    """204 sin cuerpo. 409 si hay documentos emitidos con este código."""
    await _obtener_tipo(db, codigo_sii)
    if await contar_referencias(db, DocumentoTributario.tipo_codigo, codigo_sii):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No se puede eliminar el tipo de documento porque hay documentos emitidos con este código",
        )
    await db.execute(delete(TipoDocumento).where(TipoDocumento.codigo_sii == codigo_sii))
    await db.commit()
