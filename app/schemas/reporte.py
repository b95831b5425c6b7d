"""Esquemas de los reportes que alimentan los gráficos de los paneles."""
from datetime import date

from pydantic import BaseModel, Field


class VentasPorCategoriaItem(BaseModel):
    categoria: str
    cantidad: int = Field(description="Unidades vendidas")


class VentasPorDiaItem(BaseModel):
    fecha: date
    cantidad_ventas: int
    total: int


class StockBajoItem(BaseModel):
    sku: str
    nombre: str
    stock: int
