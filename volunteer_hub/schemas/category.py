from pydantic import BaseModel


class CategoryCreate(BaseModel):
    category_name: str | None = None
    category_type: str | None = None
    description: str | None = None
    display_order: int = 0
    is_active: bool = True


class CategoryUpdate(BaseModel):
    category_name: str | None = None
    category_type: str | None = None
    description: str | None = None
    display_order: int | None = None
    is_active: bool | None = None


class CategoryResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    category_name: str
    category_type: str
    description: str | None = None
    display_order: int
    is_active: bool
    created_at: str


class CatalogEntry(BaseModel):
    value: str
    label: str
    parent: str | None = None
