from fastapi import Request

from .services.category_service import CategoryService
from .services.recurrence_service import PatternService, RuleService
from .services.task_service import TaskService
from .services.timer import TimerRegistry


def get_task_service(request: Request) -> TaskService:
    return request.app.state.task_service


def get_category_service(request: Request) -> CategoryService:
    return request.app.state.category_service


def get_pattern_service(request: Request) -> PatternService:
    return request.app.state.pattern_service


def get_rule_service(request: Request) -> RuleService:
    return request.app.state.rule_service


def get_timers(request: Request) -> TimerRegistry:
    return request.app.state.timers
