from sqlalchemy import Column, String, Integer, Float, Boolean, Text, ForeignKey, Index
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class Video(BaseModel, Base):
    __tablename__ = "videos"

    video_file = Column(String(512), nullable=False)
    thumbnail = Column(String(512), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    duration = Column(Float, nullable=False, default=0)
    views = Column(Integer, nullable=False, default=0)
    is_published = Column(Boolean, nullable=False, default=True)

    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    owner = relationship("User", back_populates="videos")

    __table_args__ = (
        Index("ix_videos_title", "title"),
    )

    def is_visible_to(self, user_id) -> bool:
        """Unpublished videos exist only for their owner."""
        return bool(self.is_published) or self.owner_id == user_id
