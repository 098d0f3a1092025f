# orange_market/db/models.py
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import String, Text, Integer, DateTime, ForeignKey
from datetime import datetime, timezone


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    idx: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(64))


class Product(Base):
    __tablename__ = "products"

    idx: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(128))
    content: Mapped[str] = mapped_column(Text, default="")
    price: Mapped[int] = mapped_column(Integer)
    city: Mapped[str] = mapped_column(String(64), index=True)

    # 0 = on sale, 1 = sold
    is_sold: Mapped[int] = mapped_column(Integer, default=0)

    user_idx: Mapped[int | None] = mapped_column(ForeignKey("users.idx"), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )


class ProductImage(Base):
    __tablename__ = "product_images"

    idx: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_idx: Mapped[int] = mapped_column(ForeignKey("products.idx"), index=True)
    url: Mapped[str] = mapped_column(Text)
