"""Datos iniciales: roles, categorías, marcas, tipos de documento y un administrador.

Se puede ejecutar varias veces: solo inserta lo que falta.

    python scripts/seed_stockly.py
"""
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import select

from app.core.config import settings
from app.core.database import Database
from app.core.politica import RolId
from app.core.security import hash_password
from app.models import Categoria, Marca, Rol, TipoDocumento, Usuario

ROLES = {
    RolId.ADMIN: "Administrador",
    RolId.VENDEDOR: "Vendedor",
    RolId.BODEGUERO: "Bodeguero",
}

CATEGORIAS = ["Abarrotes", "Bebidas", "Lácteos", "Limpieza", "Snacks"]
MARCAS = ["Coca-Cola", "Colun", "Carozzi", "Costa", "Soprole"]

TIPOS_DOCUMENTO = {
    "33": "Factura Electrónica",
    "34": "Factura No Afecta o Exenta Electrónica",
    "39": "Boleta Electrónica",
    "41": "Boleta No Afecta o Exenta Electrónica",
    "61": "Nota de Crédito Electrónica",
}

ADMIN_EMAIL = "admin@admin.cl"
ADMIN_PASSWORD = "admin123"


async def seed_stockly(database: Database) -> None:
    async with database.session() as session:
        for rol_id, nombre in ROLES.items():
            if not (await session.execute(select(Rol).where(Rol.id == int(rol_id)))).scalar_one_or_none():
                session.add(Rol(id=int(rol_id), nombre=nombre))
                print(f"  + Rol: {nombre} (id={int(rol_id)})")
        await session.flush()

        existentes = set((await session.execute(select(Categoria.nombre))).scalars().all())
        for nombre in CATEGORIAS:
            if nombre not in existentes:
                session.add(Categoria(nombre=nombre))
                print(f"  + Categoría: {nombre}")

        existentes = set((await session.execute(select(Marca.nombre))).scalars().all())
        for nombre in MARCAS:
            if nombre not in existentes:
                session.add(Marca(nombre=nombre))
                print(f"  + Marca: {nombre}")

        existentes = set((await session.execute(select(TipoDocumento.codigo_sii))).scalars().all())
        for codigo, nombre in TIPOS_DOCUMENTO.items():
            if codigo not in existentes:
                session.add(TipoDocumento(codigo_sii=codigo, nombre=nombre))
                print(f"  + Tipo de documento: {codigo} {nombre}")

        r = await session.execute(select(Usuario).where(Usuario.email == ADMIN_EMAIL))
        if not r.scalar_one_or_none():
            session.add(
                Usuario(
                    nombre="Administrador",
                    email=ADMIN_EMAIL,
                    password_hash=hash_password(ADMIN_PASSWORD),
                    rol_id=int(RolId.ADMIN),
                    activo=True,
                )
            )
            print(f"  + Usuario administrador: {ADMIN_EMAIL}")
        else:
            print(f"  = Usuario existente: {ADMIN_EMAIL}")


async def main() -> None:
    database = Database.from_settings(settings)
    try:
        await database.create_all()
        await seed_stockly(database)
    finally:
        await database.dispose()
    print(f"Listo. Administrador: {ADMIN_EMAIL} / {ADMIN_PASSWORD}")


if __name__ == "__main__":
    asyncio.run(main())
