"""
Moore-Hodgson Scheduler Package

A deterministic single-machine scheduler that finds the largest set of
jobs that can all finish by their due times.
"""

__version__ = '0.1.0'

from .types import (
    Job,
    ScheduleResult,
    ScheduleRequest,
    ScheduleResponse,
    SchedulingPolicy,
)

from .algorithm import (
    moore_hodgson,
    schedule,
    completion_times,
    is_on_time_feasible,
    calculate_scheduling_metrics
)

from .server import create_app, run_server
from .client import ScheduleClient, SchedulerClientError

__all__ = [
    'Job',
    'ScheduleResult',
    'ScheduleRequest',
    'ScheduleResponse',
    'SchedulingPolicy',
    'moore_hodgson',
    'schedule',
    'completion_times',
    'is_on_time_feasible',
    'calculate_scheduling_metrics',
    'create_app',
    'run_server',
    'ScheduleClient',
    'SchedulerClientError',
]
