"""
Database Schemas for the Negromate storefront

Each Pydantic model corresponds to a MongoDB collection. Collection name is the
lowercase class name.
"""
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

Role = Literal["user", "admin"]
Category = Literal["GraphicDesign", "CustomClothing", "Murals"]
OrderStatus = Literal["pending", "completed", "cancelled"]

ORDER_STATUSES = ("pending", "completed", "cancelled")


class User(BaseModel):
    username: str = Field(..., min_length=1)
    email: EmailStr
    password_hash: str = Field(..., description="BCrypt hash of the password")
    role: Role = "user"


class Product(BaseModel):
    name: str = Field(..., min_length=1)
    category: Category
    price: float = Field(..., ge=0)
    imageUrl: str = ""
    description: str = ""
    details: List[str] = Field(default_factory=list)


class OrderItem(BaseModel):
    product: str = Field(..., description="Product id")
    quantity: int = Field(..., ge=1)
    unitPriceAtPurchase: float = Field(..., ge=0, description="Price read from the product at checkout")


class Order(BaseModel):
    user: str = Field(..., description="Owner user id")
    items: List[OrderItem]
    totalAmount: float = Field(..., ge=0)
    status: OrderStatus = "pending"


class GalleryImage(BaseModel):
    id: int
    title: str = ""
    brand: str = ""
    imageUrl: str = ""
    description: str = ""


class Artists(BaseModel):
    title: str = ""
    imageUrl: str = ""
    instagram: Dict[str, str] = Field(default_factory=dict)
    paragraphs: List[str] = Field(default_factory=list)


class Content(BaseModel):
    """One document per page section; the optional blocks depend on the section."""
    model_config = ConfigDict(extra="forbid")

    section: str = Field(..., min_length=1)
    title: str = ""
    body: str = ""
    mainParagraph: Optional[str] = None
    artists: Optional[Artists] = None
    galleryImages: Optional[Dict[str, List[GalleryImage]]] = None
