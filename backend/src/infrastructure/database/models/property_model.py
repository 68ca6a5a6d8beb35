"""Property SQLAlchemy model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import JSON, DateTime, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.session import Base


class PropertyModel(Base):
    """SQLAlchemy model for the property fields the workflow reads."""

    __tablename__ = "properties"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    owner_id: Mapped[UUID] = mapped_column(Uuid, index=True, nullable=False)
    manager_id: Mapped[UUID | None] = mapped_column(Uuid, index=True, nullable=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    state: Mapped[str | None] = mapped_column(String(8), nullable=True)
    property_type: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Pricing and terms
    price: Mapped[str | None] = mapped_column(String(32), nullable=True)
    deposit: Mapped[str | None] = mapped_column(String(32), nullable=True)
    application_fee: Mapped[str | None] = mapped_column(String(32), nullable=True)
    lease_term: Mapped[str | None] = mapped_column(String(64), nullable=True)
    available_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Policies
    pet_policy: Mapped[str | None] = mapped_column(String(120), nullable=True)
    smoking_policy: Mapped[str | None] = mapped_column(String(120), nullable=True)
    occupancy_limit: Mapped[int | None] = mapped_column(Integer, nullable=True)
    utilities_included: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    rules_text: Mapped[str | None] = mapped_column(Text, nullable=True)

    listing_status: Mapped[str | None] = mapped_column(String(32), nullable=True)
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    def __repr__(self) -> str:
        return f"<PropertyModel(id={self.id}, title={self.title})>"
