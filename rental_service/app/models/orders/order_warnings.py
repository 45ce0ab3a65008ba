from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship
from shared.core.database import Base


class OrderWarning(Base):
    __tablename__ = "order_warnings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_item_id = Column(
        Integer,
        ForeignKey("order_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    inventory_item_id = Column(Integer, ForeignKey("inventory_items.id"), index=True)
    warning_type = Column(String(50), nullable=False, index=True)
    warning_message = Column(Text, nullable=False)
    severity = Column(String(20), nullable=False, default="high")
    is_resolved = Column(Boolean, nullable=False, default=False, index=True)
    resolved_at = Column(DateTime(timezone=True))
    resolved_by = Column(Integer)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False,
                        server_default=func.now(), onupdate=func.now())

    order_item = relationship("OrderItem", back_populates="warnings")
