from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String

from ..core.database import Base
from ..core.timeutils import utcnow


class RecurringTaskPattern(Base):
    __tablename__ = "recurring_task_pattern_c"

    Id = Column(Integer, primary_key=True, autoincrement=True)
    Name = Column(String(255), nullable=False, default="")
    frequency_c = Column(String(16), nullable=False, default="Daily")
    interval_c = Column(Integer, nullable=False, default=1)
    day_of_week_c = Column(String(16), nullable=True)
    day_of_month_c = Column(Integer, nullable=True)
    week_of_month_c = Column(String(16), nullable=True)
    end_of_month_c = Column(Boolean, nullable=False, default=False)
    CreatedOn = Column(DateTime, default=utcnow, nullable=False)


class RecurrenceRule(Base):
    __tablename__ = "recurrence_rule_c"

    Id = Column(Integer, primary_key=True, autoincrement=True)
    Name = Column(String(255), nullable=False, default="")
    task_c = Column(Integer, ForeignKey("task_c.Id", ondelete="SET NULL"), nullable=True)
    recurring_task_pattern_c = Column(
        Integer, ForeignKey("recurring_task_pattern_c.Id", ondelete="SET NULL"), nullable=True
    )
    start_date_c = Column(Date, nullable=False)
    end_date_c = Column(Date, nullable=True)
    CreatedOn = Column(DateTime, default=utcnow, nullable=False)
