"""Política de autorización por rutas.

Dada la ruta pedida y el token de sesión decodificado (o ``None``),
``PoliticaRutas.decidir`` indica si se permite el acceso y, si no, a dónde
redirigir. Reglas, en orden:

1. Ruta pública: se permite siempre.
2. Sin token: se deniega y se redirige al login.
3. Listas por rol (vendedor, bodega, admin), evaluadas en el orden
   configurado en ``precedencia``; la primera lista que coincide decide.
4. Cualquier otra ruta: se permite.
"""
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import IntEnum

from app.core.config import Settings
from app.core.sesion import SessionToken

logger = logging.getLogger(__name__)


class RolId(IntEnum):
    """IDs numéricos de rol tal como viajan en el token."""

    ADMIN = 1
    VENDEDOR = 2
    BODEGUERO = 3


class Categoria:
    """Nombres de las listas de prefijos protegidas por rol."""

    VENDEDOR = "vendedor"
    BODEGA = "bodega"
    ADMIN = "admin"


ROLES_POR_CATEGORIA: dict[str, frozenset[int]] = {
    Categoria.VENDEDOR: frozenset({RolId.ADMIN, RolId.VENDEDOR}),
    Categoria.BODEGA: frozenset({RolId.ADMIN, RolId.BODEGUERO}),
    Categoria.ADMIN: frozenset({RolId.ADMIN}),
}

PRECEDENCIA_POR_DEFECTO = (Categoria.VENDEDOR, Categoria.BODEGA, Categoria.ADMIN)


@dataclass(frozen=True)
class Decision:
    """Resultado de la política: permitido o redirección."""

    permitido: bool
    redireccion: str | None = None
    motivo: str = ""


def coincide_prefijo(ruta: str, prefijos: Iterable[str]) -> bool:
    """True si la ruta es igual a algún prefijo o cuelga de él (``p`` o ``p/...``)."""
    for p in prefijos:
        if p == "/":
            if ruta == "/":
                return True
            continue
        base = p.rstrip("/")
        if ruta == base or ruta.startswith(base + "/"):
            return True
    return False


class PoliticaRutas:
    """Evaluador de la política de acceso por prefijos de ruta."""

    def __init__(
        self,
        publicas: Sequence[str],
        vendedor: Sequence[str],
        bodega: Sequence[str],
        admin: Sequence[str],
        precedencia: Sequence[str] = PRECEDENCIA_POR_DEFECTO,
        login_url: str = "/login",
        redireccion_prohibido: str = "/",
    ):
        listas = {
            Categoria.VENDEDOR: tuple(vendedor),
            Categoria.BODEGA: tuple(bodega),
            Categoria.ADMIN: tuple(admin),
        }
        desconocidas = [c for c in precedencia if c not in listas]
        if desconocidas:
            raise ValueError(f"Categorías de precedencia desconocidas: {desconocidas}")
        if len(set(precedencia)) != len(precedencia):
            raise ValueError("La precedencia no puede repetir categorías")
        # Las categorías omitidas se evalúan al final en el orden por defecto
        faltantes = [c for c in PRECEDENCIA_POR_DEFECTO if c not in precedencia]
        self.publicas = tuple(publicas)
        self.precedencia = tuple(precedencia) + tuple(faltantes)
        self.listas = listas
        self.login_url = login_url
        self.redireccion_prohibido = redireccion_prohibido

    @classmethod
    def from_settings(cls, settings: Settings) -> "PoliticaRutas":
        return cls(
            publicas=settings.public_paths,
            vendedor=settings.vendor_paths,
            bodega=settings.warehouse_paths,
            admin=settings.admin_paths,
            precedencia=settings.route_precedence,
            login_url=settings.login_url,
            redireccion_prohibido=settings.forbidden_redirect,
        )

    def es_publica(self, ruta: str) -> bool:
        return coincide_prefijo(ruta, self.publicas)

    def categoria_de(self, ruta: str) -> str | None:
        """Primera categoría protegida (según precedencia) que contiene la ruta."""
        for categoria in self.precedencia:
            if coincide_prefijo(ruta, self.listas[categoria]):
                return categoria
        return None

    def decidir(self, ruta: str, sesion: SessionToken | None) -> Decision:
        if self.es_publica(ruta):
            return Decision(permitido=True, motivo="publica")
        if sesion is None:
            return Decision(permitido=False, redireccion=self.login_url, motivo="sin_sesion")

        categoria = self.categoria_de(ruta)
        if categoria is None:
            return Decision(permitido=True, motivo="sin_restriccion")
        if sesion.role in ROLES_POR_CATEGORIA[categoria]:
            return Decision(permitido=True, motivo=categoria)

        logger.debug("Rol %s sin acceso a %s (lista %s)", sesion.role, ruta, categoria)
        return Decision(permitido=False, redireccion=self.redireccion_prohibido, motivo=f"rol_{categoria}")
