"""Esquemas para marcas, categorías y productos."""
import re

from pydantic import BaseModel, Field, field_validator

PATRON_NOMBRE = re.compile(r"^[a-zA-ZÀ-ÿ0-9\s&-]+$")


def _validar_nombre(valor: str) -> str:
    limpio = valor.strip()
    if not limpio:
        raise ValueError("El nombre es obligatorio")
    if len(limpio) > 100:
        raise ValueError("El nombre no puede exceder los 100 caracteres")
    if not PATRON_NOMBRE.match(limpio):
        raise ValueError("El nombre solo puede contener letras, números, espacios, & y guiones")
    return limpio


class NombreIn(BaseModel):
    """Body para crear o renombrar una marca, categoría o rol."""

    nombre: str = Field(description="Nombre (único, máximo 100 caracteres)")

    @field_validator("nombre")
    @classmethod
    def nombre_valido(cls, v: str) -> str:
        return _validar_nombre(v)


class MarcaItem(BaseModel):
    id: int
    nombre: str


class CategoriaItem(BaseModel):
    id: int
    nombre: str


class CategoriaListItem(CategoriaItem):
    cantidad_productos: int = Field(description="Productos registrados en la categoría")


class ProductoBase(BaseModel):
    gtin: str | None = Field(default=None, description="Código de barras GTIN/EAN")
    nombre: str = Field(min_length=1, description="Nombre del producto")
    id_categoria: int = Field(description="ID de la categoría")
    id_marca: int = Field(description="ID de la marca")
    precio_venta: int = Field(ge=0, description="Precio de venta en pesos")
    precio_compra: int = Field(ge=0, description="Precio de compra en pesos")
    stock: int = Field(default=0, ge=0, description="Unidades en bodega")

    @field_validator("nombre")
    @classmethod
    def nombre_sin_espacios(cls, v: str) -> str:
        limpio = v.strip()
        if not limpio:
            raise ValueError("El nombre es obligatorio")
        return limpio

    @field_validator("gtin")
    @classmethod
    def gtin_vacio_es_nulo(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class ProductoCreate(ProductoBase):
    sku: str = Field(min_length=1, description="SKU único del producto")

    @field_validator("sku")
    @classmethod
    def sku_sin_espacios(cls, v: str) -> str:
        limpio = v.strip()
        if not limpio:
            raise ValueError("El SKU es obligatorio")
        return limpio


class ProductoUpdate(ProductoBase):
    """Reemplaza los datos del producto. Si ``sku`` viene y es distinto, se renombra."""

    sku: str | None = Field(default=None, description="Nuevo SKU (opcional)")

    @field_validator("sku")
    @classmethod
    def sku_vacio_es_nulo(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class ProductoItem(BaseModel):
    sku: str
    gtin: str | None
    nombre: str
    precio_venta: int
    precio_compra: int
    stock: int
    categoria: CategoriaItem
    marca: MarcaItem


class RolItem(BaseModel):
    id: int
    nombre: str


class TipoDocumentoIn(BaseModel):
    """Body para crear un tipo de documento tributario."""

    codigo_sii: str = Field(pattern=r"^\d{1,3}$", description="Código SII (ej. 33, 39)")
    nombre: str = Field(description="Nombre del tipo de documento")

    @field_validator("nombre")
    @classmethod
    def nombre_no_vacio(cls, v: str) -> str:
        limpio = v.strip()
        if not limpio:
            raise ValueError("El nombre es obligatorio")
        return limpio


class TipoDocumentoUpdate(BaseModel):
    nombre: str = Field(description="Nuevo nombre del tipo de documento")

    @field_validator("nombre")
    @classmethod
    def nombre_no_vacio(cls, v: str) -> str:
        limpio = v.strip()
        if not limpio:
            raise ValueError("El nombre es obligatorio")
        return limpio


class TipoDocumentoItem(BaseModel):
    codigo_sii: str
    nombre: str
