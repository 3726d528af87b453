"""Product database table model."""

from sqlalchemy import REAL, Column, Integer, Text
from sqlmodel import Field, SQLModel


class ProductTable(SQLModel, table=True):
    """Persistence model for products.

    Maps onto the single ``Product`` table::

        Id INTEGER PRIMARY KEY AUTOINCREMENT,
        Name TEXT NOT NULL,
        UnitPrice REAL NOT NULL,
        Currency TEXT NOT NULL
    """

    __tablename__ = "Product"
    __table_args__ = {"sqlite_autoincrement": True}

    id: int | None = Field(
        default=None,
        sa_column=Column("Id", Integer, primary_key=True, autoincrement=True),
    )
    name: str = Field(sa_column=Column("Name", Text, nullable=False))
    unit_price: float = Field(sa_column=Column("UnitPrice", REAL, nullable=False))
    currency: str = Field(sa_column=Column("Currency", Text, nullable=False))
