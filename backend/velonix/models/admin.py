from sqlalchemy import Column, Integer, String, DateTime
from datetime import datetime

from velonix.core.database import Base


class AdminUser(Base):
    """Administrator credential; exactly one is seeded on first boot"""
    __tablename__ = "admin_users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    last_login = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<AdminUser {self.username}>"
