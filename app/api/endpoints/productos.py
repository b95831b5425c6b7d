"""Endpoints de productos. Lectura para cualquier rol; escritura para Administrador y Bodeguero."""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.api.endpoints.auth import get_current_user, require_roles
from app.core.database import get_db
from app.core.politica import RolId
from app.models import Categoria, DetalleVenta, Marca, Producto, Usuario
from app.schemas.catalogo import CategoriaItem, MarcaItem, ProductoCreate, ProductoItem, ProductoUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/productos", tags=["productos"])

ROLES_ESCRITURA = (RolId.ADMIN, RolId.BODEGUERO)


def producto_a_item(p: Producto) -> ProductoItem:
    return ProductoItem(
        sku=p.sku,
        gtin=p.gtin,
        nombre=p.nombre,
        precio_venta=p.precio_venta,
        precio_compra=p.precio_compra,
        stock=p.stock,
        categoria=CategoriaItem(id=p.categoria.id, nombre=p.categoria.nombre),
        marca=MarcaItem(id=p.marca.id, nombre=p.marca.nombre),
    )


async def _obtener_producto(db: AsyncSession, sku: str) -> Producto:
    r = await db.execute(
        select(Producto)
        .options(selectinload(Producto.categoria), selectinload(Producto.marca))
        .where(Producto.sku == sku)
        .execution_options(populate_existing=True)
    )
    producto = r.scalar_one_or_none()
    if not producto:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Producto no encontrado",
        )
    return producto


async def _verificar_referencias(db: AsyncSession, id_categoria: int, id_marca: int) -> None:
    if not (await db.execute(select(Categoria.id).where(Categoria.id == id_categoria))).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="La categoría indicada no existe",
        )
    if not (await db.execute(select(Marca.id).where(Marca.id == id_marca))).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="La marca indicada no existe",
        )


@router.get("", response_model=list[ProductoItem], summary="Listar productos")
async def listar_productos(
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(get_current_user),
):
    """Productos con su categoría y marca, ordenados por nombre."""
    result = await db.execute(
        select(Producto)
        .options(selectinload(Producto.categoria), selectinload(Producto.marca))
        .order_by(Producto.nombre)
    )
    return [producto_a_item(p) for p in result.scalars().all()]


@router.get("/{sku}", response_model=ProductoItem, summary="Obtener producto por SKU")
async def obtener_producto(
    sku: str,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(get_current_user),
):
    return producto_a_item(await _obtener_producto(db, sku.strip()))


@router.post("", response_model=ProductoItem, status_code=status.HTTP_201_CREATED, summary="Crear producto")
async def crear_producto(
    body: ProductoCreate,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(*ROLES_ESCRITURA)),
):
    existe = await db.execute(select(Producto.sku).where(Producto.sku == body.sku))
    if existe.first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="El SKU ya está registrado",
        )
    await _verificar_referencias(db, body.id_categoria, body.id_marca)

    db.add(
        Producto(
            sku=body.sku,
            gtin=body.gtin,
            nombre=body.nombre,
            categoria_id=body.id_categoria,
            marca_id=body.id_marca,
            precio_venta=body.precio_venta,
            precio_compra=body.precio_compra,
            stock=body.stock,
        )
    )
    await db.commit()
    return producto_a_item(await _obtener_producto(db, body.sku))


@router.put("/{sku}", response_model=ProductoItem, summary="Actualizar producto")
async def actualizar_producto(
    sku: str,
    body: ProductoUpdate,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(*ROLES_ESCRITURA)),
):
    """Reemplaza los datos del producto. Si el body trae otro SKU, el producto se renombra (409 si ya existe)."""
    sku_original = sku.strip()
    producto = await _obtener_producto(db, sku_original)
    sku_final = body.sku or sku_original

    if sku_final != sku_original:
        existe = await db.execute(select(Producto.sku).where(Producto.sku == sku_final))
        if existe.first():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="El SKU ya está registrado por otro producto",
            )
    await _verificar_referencias(db, body.id_categoria, body.id_marca)

    producto.gtin = body.gtin
    producto.nombre = body.nombre
    producto.categoria_id = body.id_categoria
    producto.marca_id = body.id_marca
    producto.precio_venta = body.precio_venta
    producto.precio_compra = body.precio_compra
    producto.stock = body.stock
    await db.flush()

    if sku_final != sku_original:
        # El cambio de PK se hace con UPDATE directo; los detalles de venta siguen al producto
        db.expunge(producto)
        await db.execute(
            update(Producto)
            .where(Producto.sku == sku_original)
            .values(sku=sku_final)
            .execution_options(synchronize_session=False)
        )
        await db.execute(
            update(DetalleVenta)
            .where(DetalleVenta.sku == sku_original)
            .values(sku=sku_final)
            .execution_options(synchronize_session=False)
        )
        logger.info("Producto renombrado: %s -> %s", sku_original, sku_final)

    await db.commit()
    return producto_a_item(await _obtener_producto(db, sku_final))


@router.delete("/{sku}", response_model=ProductoItem, summary="Eliminar producto")
async def eliminar_producto(
    sku: str,
    db: AsyncSession = Depends(get_db),
    _: Usuario = Depends(require_roles(*ROLES_ESCRITURA)),
):
    """Elimina el producto y devuelve sus datos. 409 si aparece en ventas registradas."""
    producto = await _obtener_producto(db, sku.strip())
    eliminado = producto_a_item(producto)
    r = await db.execute(select(func.count()).select_from(DetalleVenta).where(DetalleVenta.sku == producto.sku))
    if r.scalar_one() > 0:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No se puede eliminar el producto porque tiene ventas asociadas",
        )
    await db.execute(delete(Producto).where(Producto.sku == producto.sku))
    await db.commit()
    return eliminado
