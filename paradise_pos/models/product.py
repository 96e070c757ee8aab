"""Product descriptor used by the register"""

from pydantic import BaseModel
from typing import Optional


class ProductRef(BaseModel):
    """Product as seen by the cart: identity and unit price only.

    The catalog itself lives in the backend; the register only needs
    enough to price a line and print a receipt.
    """
    id: str
    name: str
    price: float
    sku: Optional[str] = None
    barcode: Optional[str] = None

    class Config:
        from_attributes = True
