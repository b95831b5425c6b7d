"""Endpoints de clientes. Administrador y Vendedor."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.endpoints.auth import require_roles
from app.core.database import get_db
from app.core.politica import RolId
from app.models import Cliente, Usuario, Venta
from app.schemas.cliente import ClienteCreate, ClienteEmailIn, ClienteItem, ClienteUpdate
from app.services.catalogo_service import contar_referencias, filtrar_por_texto

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clientes", tags=["clientes"])

ROLES_CAJA = (RolId.ADMIN, RolId.VENDEDOR)


def cliente_a_item(c: Cliente) -> ClienteItem:
    return ClienteItem(id=c.id, nombre=c.nombre, email=c.email, telefono=c.telefono, rut=c.rut)


async def _obtener_cliente(db: AsyncSession, cliente_id: int) -> Cliente:
    cliente = await db.get(Cliente, cliente_id)
    if not cliente:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Cliente no encontrado",
        )
    return cliente


async def _email_libre(db: AsyncSession, email: str, excluir_id: int | None = None) -> None:
    q = select(Cliente.id).where(Cliente.email == email)
    if excluir_id is not None:
        q = q.where(Cliente.id != excluir_id)
    if (await db.execute(q)).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="El correo ya está registrado para otro cliente",
        )


@router.get("", response_model=list[ClienteItem], summary="Listar clientes")
async def listar_clientes(
    search: str | None = Query(default=None, description="Filtra por nombre o correo"),
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(*ROLES_CAJA)),
):
    q = filtrar_por_texto(select(Cliente).order_by(Cliente.nombre), search, Cliente.nombre, Cliente.email)
    return [cliente_a_item(c) for c in (await db.execute(q)).scalars().all()]


@router.post("/email", response_model=ClienteItem, summary="Buscar cliente por correo")
async def buscar_por_email(
    body: ClienteEmailIn,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(*ROLES_CAJA)),
):
    """Búsqueda exacta por correo, usada en caja para asociar la venta a un cliente."""
    r = await db.execute(select(Cliente).where(Cliente.email == body.email))
    cliente = r.scalar_one_or_none()
    if not cliente:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Cliente no encontrado",
        )
    return cliente_a_item(cliente)


@router.get("/{cliente_id}", response_model=ClienteItem, summary="Obtener cliente")
async def obtener_cliente(
    cliente_id: int,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(*ROLES_CAJA)),
):
    return cliente_a_item(await _obtener_cliente(db, cliente_id))


@router.post(
    "",
    response_model=ClienteItem,
    status_code=status.HTTP_201_CREATED,
    summary="Crear cliente",
    responses={409: {"description": "Correo ya registrado"}},
)
async def crear_cliente(
    body: ClienteCreate,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(*ROLES_CAJA)),
):
    await _email_libre(db, body.email)
    cliente = Cliente(nombre=body.nombre, email=body.email, telefono=body.telefono, rut=body.rut)
    db.add(cliente)
    await db.commit()
    logger.info("Cliente creado: %s", cliente.id)
    return cliente_a_item(cliente)


@router.put("/{cliente_id}", response_model=ClienteItem, summary="Actualizar cliente")
async def actualizar_cliente(
    cliente_id: int,
    body: ClienteUpdate,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(*ROLES_CAJA)),
):
    cliente = await _obtener_cliente(db, cliente_id)
    cambios = body.model_dump(exclude_unset=True)
    if cambios.get("email") and cambios["email"] != cliente.email:
        await _email_libre(db, cambios["email"], excluir_id=cliente_id)
    for campo in ("nombre", "email", "telefono"):
        if cambios.get(campo) is not None:
            setattr(cliente, campo, cambios[campo])
    if "rut" in cambios:
        cliente.rut = cambios["rut"]
    await db.commit()
    return cliente_a_item(cliente)


@router.delete("/{cliente_id}", response_model=ClienteItem, summary="Eliminar cliente")
async def eliminar_cliente(
    cliente_id: int,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(RolId.ADMIN)),
):
    """Elimina el cliente y devuelve sus datos. 409 si tiene ventas asociadas."""
    cliente = await _obtener_cliente(db, cliente_id)
    eliminado = cliente_a_item(cliente)
    if await contar_referencias(db, Venta.cliente_id, cliente_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No se puede eliminar el cliente porque tiene ventas asociadas",
        )
    await db.execute(delete(Cliente).where(Cliente.id == cliente_id))
    await db.commit()
    return eliminado
