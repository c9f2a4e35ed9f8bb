from pydantic import Field

from .base import CamelModel


class Category(CamelModel):
    id: int
    name: str
    color: str = ""
    icon: str = ""
    sub_category: str | None = None


class CategoryCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    color: str = "#6366f1"
    icon: str = "Folder"
    sub_category: str | None = None


class CategoryUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    color: str | None = None
    icon: str | None = None
    sub_category: str | None = None
