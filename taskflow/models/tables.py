from .category import Category
from .recurrence import RecurrenceRule, RecurringTaskPattern
from .task import Task

# storage table name -> declarative model
MODELS = {
    Task.__tablename__: Task,
    Category.__tablename__: Category,
    RecurringTaskPattern.__tablename__: RecurringTaskPattern,
    RecurrenceRule.__tablename__: RecurrenceRule,
}
