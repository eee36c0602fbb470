"""
Database CRUD service
Reads and writes the system_config key/value table (theme preference)
"""
from typing import Optional
from sqlalchemy.orm import Session

from database.models import SystemConfig
from app.models.schemas import Theme


DEFAULT_THEME = Theme.LIGHT


# ============================================
# System config CRUD
# ============================================

def get_system_config(db: Session, config_key: str) -> Optional[str]:
    """Return a config value, or None when the key is not set"""
    config = db.query(SystemConfig).filter(SystemConfig.config_key == config_key).first()
    return config.config_value if config else None


def set_system_config(db: Session, config_key: str, config_value: str,
                      description: str = None) -> SystemConfig:
    """Set a config value (update if present, create otherwise)"""
    config = db.query(SystemConfig).filter(SystemConfig.config_key == config_key).first()
    if config:
        config.config_value = config_value
        if description:
            config.description = description
    else:
        config = SystemConfig(
            config_key=config_key,
            config_value=config_value,
            description=description
        )
        db.add(config)
    db.commit()
    db.refresh(config)
    return config


# ============================================
# Theme preference
# ============================================

def get_theme(db: Session) -> Theme:
    """Stored theme; unknown or missing values fall back to the default"""
    value = get_system_config(db, SystemConfig.THEME)
    try:
        return Theme(value) if value else DEFAULT_THEME
    except ValueError:
        return DEFAULT_THEME


def set_theme(db: Session, theme: Theme) -> Theme:
    set_system_config(db, SystemConfig.THEME, theme.value, "Display theme")
    return theme
