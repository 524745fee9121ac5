from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Table, event, inspect
from sqlalchemy.orm import relationship, validates, Session

from models.base_model import Base, BaseModel, utcnow
from utils.security import hash_password

# Videos a user opened, one row per (user, video); re-watching bumps watched_at
watch_history = Table(
    "watch_history",
    Base.metadata,
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("video_id", String(36), ForeignKey("videos.id", ondelete="CASCADE"), primary_key=True),
    Column("watched_at", DateTime(timezone=True), default=utcnow, nullable=False),
)


class User(BaseModel, Base):
    __tablename__ = "users"

    username = Column(String(64), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    full_name = Column(String(255), nullable=False, index=True)
    avatar = Column(String(512), nullable=False)
    cover_image = Column(String(512), nullable=False, default="")
    # argon2 digest; plaintext assigned here is hashed on flush
    password = Column(String(255), nullable=False)
    # single active refresh token slot
    refresh_token = Column(Text, nullable=True)

    videos = relationship("Video", back_populates="owner", passive_deletes=True)

    @validates("username", "email")
    def _normalize_identity(self, key, value):
        return value.strip().lower() if isinstance(value, str) else value

    @validates("full_name")
    def _normalize_full_name(self, key, value):
        return value.strip() if isinstance(value, str) else value


@event.listens_for(Session, "before_flush")
def _hash_changed_passwords(session, flush_context, instances):
    """Hash a user's password only when the attribute changed since the last flush."""
    for obj in list(session.new) + list(session.dirty):
        if not isinstance(obj, User):
            continue
        added = inspect(obj).attrs.password.history.added
        if added and added[0]:
            obj.password = hash_password(added[0])
