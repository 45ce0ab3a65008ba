from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Text, func
from sqlalchemy.orm import relationship
from shared.core.database import Base


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    # NULL for custom / extension lines, which never count against stock
    inventory_item_id = Column(Integer, ForeignKey("inventory_items.id"), index=True)
    name = Column(Text, nullable=False)  # encrypted
    size = Column(Text, nullable=False)  # encrypted
    quantity = Column(Integer, nullable=False)
    price = Column(Integer, nullable=False, default=0)
    is_extension = Column(Boolean, nullable=False, default=False)
    is_custom = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    order = relationship("Order", back_populates="items")
    warnings = relationship("OrderWarning", back_populates="order_item",
                            cascade="all, delete-orphan", passive_deletes=True)
