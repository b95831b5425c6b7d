"""Consultas comunes a los catálogos que se identifican por nombre.

Marcas, categorías, roles y tipos de documento comparten la búsqueda por
texto, la unicidad del nombre sin distinguir mayúsculas y el conteo de
filas que los referencian antes de eliminar.
"""
from typing import Any

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

ESCAPE = "\\"


def patron_contiene(texto: str) -> str:
    """Patrón LIKE que busca ``texto`` de forma literal (``%`` y ``_`` no son comodines)."""
    escapado = texto.replace(ESCAPE, ESCAPE * 2).replace("%", ESCAPE + "%").replace("_", ESCAPE + "_")
    return f"%{escapado}%"


def filtrar_por_texto(q: Select, search: str | None, *columnas: InstrumentedAttribute) -> Select:
    """Agrega a ``q`` un ILIKE sobre las columnas indicadas; sin texto, ``q`` queda igual."""
    if not search or not search.strip():
        return q
    patron = patron_contiene(search.strip())
    return q.where(or_(*(c.ilike(patron, escape=ESCAPE) for c in columnas)))


async def nombre_en_uso(
    db: AsyncSession,
    columna_nombre: InstrumentedAttribute,
    nombre: str,
    columna_id: InstrumentedAttribute | None = None,
    excluir: Any = None,
) -> bool:
    q = select(columna_nombre).where(func.lower(columna_nombre) == nombre.lower())
    if columna_id is not None and excluir is not None:
        q = q.where(columna_id != excluir)
    return (await db.execute(q.limit(1))).first() is not None


async def contar_referencias(db: AsyncSession, columna_fk: InstrumentedAttribute, valor: Any) -> int:
    """Filas de la tabla de ``columna_fk`` que apuntan a ``valor``."""
    r = await db.execute(select(func.count()).select_from(columna_fk.class_).where(columna_fk == valor))
    return r.scalar_one()
