from sqlalchemy import (
    create_engine,
    Column,
    Integer,
    String,
    DateTime,
    Text,
    ForeignKey,
    Boolean,
)
from sqlalchemy.orm import declarative_base, sessionmaker, relationship
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql import func

from .config import DATABASE_URL

# In-memory SQLite needs a single shared connection
engine_options = {}
if "sqlite" in DATABASE_URL:
    engine_options["connect_args"] = {"check_same_thread": False}
    if DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
        engine_options["poolclass"] = StaticPool

# Create engine
engine = create_engine(DATABASE_URL, **engine_options)

# Create session
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(100), unique=True, index=True, nullable=False)
    hashed_password = Column(String(100), nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    profile = relationship(
        "UserProfile", back_populates="user", uselist=False, cascade="all, delete"
    )
    closet_items = relationship(
        "ClosetItem",
        back_populates="user",
        cascade="all, delete",
        order_by="ClosetItem.created_at",
    )
    activities = relationship("UserActivity", back_populates="user")
    style_suggestions = relationship("StyleSuggestion", back_populates="user")


class UserProfile(Base):
    __tablename__ = "user_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    name = Column(String(100), default="")
    age = Column(String(10), default="")
    height = Column(String(20), default="")  # centimetres
    weight = Column(String(20), default="")  # kilograms
    gender = Column(String(30), default="")
    face_scan = Column(Text)  # data URI
    body_scan = Column(Text)  # data URI
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="profile")


class ClosetItem(Base):
    __tablename__ = "closet_items"

    id = Column(String(64), primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    image_data_uri = Column(Text, nullable=False)
    description = Column(String(200))  # AI generated, e.g. "Blue Denim Jacket"
    category = Column(String(50))  # Top, Bottoms, Outerwear, Footwear, Accessory
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="closet_items")


class UserActivity(Base):
    __tablename__ = "user_activities"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    activity_type = Column(
        String(50), nullable=False
    )  # user_signup, profile_update, hairstyle_suggestions, etc.
    activity_data = Column(Text)  # JSON data of the activity
    timestamp = Column(DateTime(timezone=True), server_default=func.now())
    ip_address = Column(String(45))
    user_agent = Column(String(500))

    # Relationships
    user = relationship("User", back_populates="activities")


class StyleSuggestion(Base):
    __tablename__ = "style_suggestions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    suggestion_type = Column(String(50), nullable=False)
    request_summary = Column(Text)  # JSON of the non-image request fields
    result = Column(Text)  # JSON of the validated AI output
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="style_suggestions")


# Dependency to get database session
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# Create tables
def create_tables():
    Base.metadata.create_all(bind=engine)
