"""
Base schemas with standardized field types for consistent API responses.
"""

from pydantic import BaseModel, ConfigDict


class StandardizedModel(BaseModel):
    """Base model with standardized JSON encoding"""

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True, from_attributes=True)


class Pagination(StandardizedModel):
    total: int
    page: int
    limit: int
    pages: int

    @classmethod
    def build(cls, *, total: int, page: int, limit: int) -> "Pagination":
        pages = (total + limit - 1) // limit if limit else 0
        return cls(total=total, page=page, limit=limit, pages=pages)
