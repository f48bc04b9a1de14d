# aet_portal/models/user.py
"""
Portal users — transport companies requesting AETs and the administrators
who process them. Rows are never updated after creation.
"""

from sqlalchemy import Column, Integer, String, DateTime, Boolean
from aet_portal.database import Base


class User(Base):
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)   # opaque credential from the auth gateway
    full_name = Column(String(200), nullable=False)
    phone = Column(String(50), nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<User {self.id} email={self.email} admin={self.is_admin}>"
