"""Product SQLAlchemy model"""

from sqlalchemy import Column, Integer, Text, Boolean, Float, DateTime, Index, func

from .base import Base, PortableJSONB


class Product(Base):
    """Product model representing catalog entries served by semantic search.

    Rows are owned by the catalog service; the search subsystem only reads
    them and writes the ``embedding`` column. ``price_numeric`` and
    ``rating_numeric`` are denormalized from the display strings so filters
    can be pushed into SQL.
    """
    __tablename__ = "product"
    __table_args__ = (
        Index("ix_product_category", "category"),
        Index("ix_product_category_sub", "category", "sub_category"),
        Index("ix_product_price_numeric", "price_numeric"),
        Index("ix_product_out_of_stock", "out_of_stock"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    pid = Column(Text, nullable=False, unique=True)
    title = Column(Text, nullable=False)
    brand = Column(Text, nullable=False, server_default="")
    description = Column(Text, nullable=True)
    category = Column(Text, nullable=False, server_default="")
    sub_category = Column(Text, nullable=False, server_default="")
    actual_price = Column(Text, nullable=True)
    selling_price = Column(Text, nullable=True)
    average_rating = Column(Text, nullable=True)
    seller = Column(Text, nullable=True)
    out_of_stock = Column(Boolean, nullable=False, default=False)
    product_details = Column(PortableJSONB, nullable=True)
    price_numeric = Column(Integer, nullable=False, default=0)
    rating_numeric = Column(Float, nullable=False, default=0.0)
    # NULL until the backfill job (or the catalog update path) embeds the product
    embedding = Column(PortableJSONB, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def to_dict(self):
        """Convert product to dictionary representation"""
        return {
            "id": self.id,
            "pid": self.pid,
            "title": self.title,
            "brand": self.brand,
            "description": self.description,
            "category": self.category,
            "sub_category": self.sub_category,
            "actual_price": self.actual_price,
            "selling_price": self.selling_price,
            "average_rating": self.average_rating,
            "seller": self.seller,
            "out_of_stock": self.out_of_stock,
            "price_numeric": self.price_numeric,
            "rating_numeric": self.rating_numeric,
            "has_embedding": bool(self.embedding),
        }
