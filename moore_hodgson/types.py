"""
Data models for the Moore-Hodgson scheduler.

This module defines the core data structures used in scheduling:
- Jobs with a due time and a processing time
- The result of a scheduling run
- Requests and responses exchanged with the HTTP server
- Policy configuration for the server
"""

from dataclasses import dataclass, field
from typing import Any, List, NamedTuple, Optional


class Job(NamedTuple):
    """
    A job to be scheduled.

    Being a tuple, a Job is interchangeable with a plain
    ``(payload, due_time, processing_time)`` triple.

    Attributes:
        payload: Opaque value carried along with the job
        due_time: Time by which the job should be finished
        processing_time: Time the job takes to run
    """
    payload: Any
    due_time: Any
    processing_time: Any


@dataclass
class ScheduleResult:
    """
    Outcome of scheduling a list of jobs.

    Attributes:
        jobs: All jobs, on-time ones first in execution order
        on_time_count: Number of jobs that finish by their due time
    """
    jobs: List[Job]
    on_time_count: int

    def __post_init__(self):
        """Validate the on-time count."""
        if not 0 <= self.on_time_count <= len(self.jobs):
            raise ValueError(
                f"On-time count must be between 0 and {len(self.jobs)}, "
                f"got {self.on_time_count}"
            )

    @property
    def on_time_jobs(self) -> List[Job]:
        return self.jobs[:self.on_time_count]

    @property
    def late_jobs(self) -> List[Job]:
        return self.jobs[self.on_time_count:]


@dataclass
class ScheduleRequest:
    """
    Request to schedule jobs on a single machine.

    Attributes:
        jobs: List of jobs waiting to be scheduled
    """
    jobs: List[Job]


@dataclass
class ScheduleResponse:
    """
    Response containing the scheduling decision.

    Attributes:
        on_time_count: Number of on-time jobs
        on_time_jobs: On-time jobs in execution order
        late_jobs: Jobs that cannot finish by their due time
        completion_times: End time of each on-time job, if requested
        metrics: Summary metrics computed by the server
    """
    on_time_count: int
    on_time_jobs: List[Job]
    late_jobs: List[Job]
    completion_times: Optional[List[Any]] = None
    metrics: dict = field(default_factory=dict)


@dataclass
class SchedulingPolicy:
    """
    Policy configuration for the scheduler server.

    Attributes:
        max_jobs: Maximum number of jobs accepted in one request
        include_completion_times: Whether responses list completion times
    """
    max_jobs: int = 10000
    include_completion_times: bool = True

    def __post_init__(self):
        """Validate policy fields."""
        if self.max_jobs < 1:
            raise ValueError(f"Max jobs must be at least 1, got {self.max_jobs}")
