
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from projecthub.db.session import Base

class UserRole(str, Enum):
    STUDENT_THIRD = "student_third"
    STUDENT_FOURTH = "student_fourth"
    FACULTY = "faculty"

class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), index=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    projects = relationship(
        "Project",
        back_populates="author",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
