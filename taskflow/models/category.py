from sqlalchemy import Column, DateTime, Integer, String

from ..core.database import Base
from ..core.timeutils import utcnow


class Category(Base):
    __tablename__ = "category_c"

    Id = Column(Integer, primary_key=True, autoincrement=True)
    Name = Column(String(255), nullable=False, unique=True)
    color_c = Column(String(32), nullable=True)
    icon_c = Column(String(64), nullable=True)
    sub_category_c = Column(String(255), nullable=True)
    CreatedOn = Column(DateTime, default=utcnow, nullable=False)
