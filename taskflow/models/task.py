from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text

from ..core.database import Base
from ..core.timeutils import utcnow


class Task(Base):
    __tablename__ = "task_c"

    Id = Column(Integer, primary_key=True, autoincrement=True)
    title_c = Column(String(100), nullable=False, default="")
    description_c = Column(Text, nullable=True)
    category_c = Column(Integer, ForeignKey("category_c.Id", ondelete="SET NULL"), nullable=True)
    sub_category_c = Column(String(255), nullable=True)
    priority_c = Column(String(16), nullable=False, default="medium")
    due_date_c = Column(Date, nullable=True)
    completed_c = Column(Boolean, nullable=False, default=False)
    completed_at_c = Column(DateTime, nullable=True)
    time_spent_c = Column(Integer, nullable=False, default=0)
    timer_state_is_running_c = Column(Boolean, nullable=False, default=False)
    timer_state_last_updated_c = Column(DateTime, nullable=True)
    CreatedOn = Column(DateTime, default=utcnow, nullable=False)
