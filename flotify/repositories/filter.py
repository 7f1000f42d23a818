"""
Flotify - List Filtering

Name search, sorting and pagination shared by the catalog list endpoints.
"""

from typing import List, Optional, Sequence

from pydantic import BaseModel, Field
from sqlmodel import SQLModel

from flotify.errors import InvalidSortError


class Filter(BaseModel):
    """
    Attributes:
        name: Case-insensitive substring match on the name column
        page: 1-based page number
        limit: Page size
        sort_by: Column names; a leading "-" sorts descending
    """
    name: Optional[str] = None
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    sort_by: List[str] = Field(default_factory=list)
    
    @property
    def offset(self) -> int:
        return self.limit * (self.page - 1)
    
    def order_by(self, model: type[SQLModel], allowed: Sequence[str]) -> list:
        """
        Translate sort criteria into ORDER BY clauses.
        
        Raises:
            InvalidSortError: Criteria names a column outside allowed
        """
        clauses = []
        for criteria in self.sort_by:
            field = criteria.removeprefix("-")
            if field not in allowed:
                raise InvalidSortError(f"cannot sort by {field!r}")
            column = getattr(model, field)
            clauses.append(column.desc() if criteria.startswith("-") else column.asc())
        return clauses
    
    def apply(self, statement, model: type[SQLModel], allowed: Sequence[str]):
        """Add name search, ordering and paging to a select statement."""
        if self.name:
            statement = statement.where(model.name.ilike(f"%{self.name}%"))
        order = self.order_by(model, allowed)
        if order:
            statement = statement.order_by(*order)
        return statement.offset(self.offset).limit(self.limit)
