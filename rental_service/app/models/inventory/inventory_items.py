from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text, func
from sqlalchemy.orm import relationship
from shared.core.database import Base


class InventoryItem(Base):
    __tablename__ = "inventory_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)        # encrypted
    category = Column(Text, nullable=False)    # encrypted
    category_counter = Column(Integer, nullable=False, default=0)
    image_url = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False,
                        server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False,
                        server_default=func.now(), onupdate=func.now())

    sizes = relationship(
        "InventorySize",
        back_populates="item",
        cascade="all, delete-orphan",
        passive_deletes=True
    )
    tags = relationship("Tag", secondary="inventory_tags", lazy="selectin")


class InventoryTag(Base):
    __tablename__ = "inventory_tags"

    item_id = Column(Integer, ForeignKey("inventory_items.id", ondelete="CASCADE"),
                     primary_key=True)
    tag_id = Column(Integer, ForeignKey("tags.id", ondelete="CASCADE"),
                    primary_key=True)
