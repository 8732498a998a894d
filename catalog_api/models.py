# catalog_api/models.py
from pydantic import BaseModel, ConfigDict, Field


class ProductIn(BaseModel):
    """A validated product payload, before the store assigns an id."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str
    price: float
    category: str
    in_stock: bool = Field(alias="inStock")


class Product(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: str
    price: float
    category: str
    in_stock: bool = Field(alias="inStock")

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True)
