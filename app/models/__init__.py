"""Modelos SQLAlchemy (tablas de la base de datos)."""
from app.models.role import Rol
from app.models.user import Usuario
from app.models.marca import Marca
from app.models.categoria import Categoria
from app.models.producto import Producto
from app.models.venta import DetalleVenta, Pago, Venta
from app.models.documento import DocumentoTributario, TipoDocumento
from app.models.cliente import Cliente

__all__ = [
    "Rol",
    "Usuario",
    "Marca",
    "Categoria",
    "Producto",
    "Pago",
    "Venta",
    "DetalleVenta",
    "TipoDocumento",
    "DocumentoTributario",
    "Cliente",
]
