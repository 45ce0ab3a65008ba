from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from shared.core.database import Base


class InventorySize(Base):
    __tablename__ = "inventory_sizes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    item_id = Column(
        Integer,
        ForeignKey("inventory_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    # every column below is stored encrypted, numbers as their decimal string
    title = Column(Text, nullable=False)
    quantity = Column(Text, nullable=False)
    on_hand = Column(Text, nullable=False)
    price = Column(Text, nullable=False)

    item = relationship("InventoryItem", back_populates="sizes")
