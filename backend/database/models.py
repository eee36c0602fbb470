"""
SQLAlchemy model definitions
The only persisted state is the system_config key/value table
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime
from .config import Base


class SystemConfig(Base):
    """
    System configuration table
    Stores user preferences such as the display theme
    """
    __tablename__ = "system_config"

    id = Column(Integer, primary_key=True, autoincrement=True, comment="Config ID")
    config_key = Column(String(50), unique=True, nullable=False, comment="Config key")
    config_value = Column(String(255), nullable=False, comment="Config value")
    description = Column(Text, nullable=True, comment="Description")
    created_at = Column(DateTime, default=datetime.now, comment="Created at")
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, comment="Updated at")

    __table_args__ = (
        {"comment": "System configuration"}
    )

    # Predefined config keys
    THEME = "theme"  # display theme, "light" or "dark"
