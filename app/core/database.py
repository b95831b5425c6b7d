"""Conexión asíncrona a la base de datos con SQLAlchemy 2.0.

El pool de conexiones no es un singleton de módulo: se construye un
``Database`` explícito al crear la aplicación y cada request obtiene su
propia sesión mediante la dependencia ``get_db``.
"""
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Request
from sqlalchemy import BigInteger, Integer
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from app.core.config import Settings


class Base(DeclarativeBase):
    """Base para todos los modelos SQLAlchemy."""

    pass


class Database:
    """Handle del pool de conexiones: engine + fábrica de sesiones."""

    def __init__(self, url: str, *, echo: bool = False, pool_size: int = 5, max_overflow: int = 10):
        self.url = url
        if make_url(url).get_backend_name() == "sqlite":
            # SQLite en memoria: una sola conexión compartida
            self.engine: AsyncEngine = create_async_engine(
                url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_async_engine(
                url,
                echo=echo,
                pool_pre_ping=True,
                pool_size=pool_size,
                max_overflow=max_overflow,
            )
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.database_url_async,
            echo=settings.debug,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Abre una sesión; confirma si todo va bien y revierte ante errores."""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Crea las tablas si no existen."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """Dependencia para obtener una sesión de base de datos por request."""
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session


# BIGINT en PostgreSQL; INTEGER en SQLite para que la PK sea alias de rowid
BigId = BigInteger().with_variant(Integer(), "sqlite")
