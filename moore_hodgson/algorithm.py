"""
Core scheduling algorithm.

This module implements Moore-Hodgson scheduling for a single machine: pick
the largest set of jobs that can run back-to-back from time zero without
any of them finishing after its due time, and move those jobs to the front
of the sequence in execution order.

The algorithm is deterministic: given the same inputs, it will always
produce the same outputs.
"""

from typing import Any, List, MutableSequence, Sequence

from .types import Job, ScheduleResult


def _less(left: Any, right: Any) -> bool:
    """Return ``left < right``, treating incomparable operands as False."""
    try:
        return bool(left < right)
    except TypeError:
        return False


def _less_equal(left: Any, right: Any) -> bool:
    """Return ``left <= right``, treating incomparable operands as False."""
    try:
        return bool(left <= right)
    except TypeError:
        return False


def moore_hodgson(jobs: MutableSequence, zero: Any = 0) -> int:
    """
    Reorder jobs in place so the on-time jobs come first.

    Each item is a ``(payload, due_time, processing_time)`` triple. After
    the call, the first ``k`` items are the on-time jobs in the order they
    should run and the remaining items are the late jobs in no particular
    order. Only positions change; the items themselves are never modified.

    Algorithm:
    1. Find the unresolved job with the smallest due time (the leftmost
       one wins ties and incomparable due times)
    2. If it finishes by its due time when run next, append it to the
       on-time prefix and advance the clock
    3. Otherwise move it to the front of the late suffix

    A due time that cannot be compared, such as NaN, never satisfies a
    comparison, so its job always ends up late.

    Args:
        jobs: Mutable sequence of ``(payload, due_time, processing_time)``
        zero: Starting completion time, added to the first processing time

    Returns:
        Number of on-time jobs ``k``

    Complexity:
        O(n^2) time, O(1) extra space
    """
    on_time_end = 0
    late_start = len(jobs)
    completion_time = zero

    while on_time_end != late_start:
        min_index = on_time_end
        min_due_time = jobs[min_index][1]
        for i in range(on_time_end + 1, late_start):
            due_time = jobs[i][1]
            if _less(due_time, min_due_time):
                min_index = i
                min_due_time = due_time

        end_time = completion_time + jobs[min_index][2]

        if _less_equal(end_time, min_due_time):
            jobs[min_index], jobs[on_time_end] = jobs[on_time_end], jobs[min_index]
            on_time_end += 1
            completion_time = end_time
        else:
            late_start -= 1
            jobs[min_index], jobs[late_start] = jobs[late_start], jobs[min_index]

    return on_time_end


def schedule(jobs: Sequence, zero: Any = 0) -> ScheduleResult:
    """
    Schedule a copy of ``jobs`` and leave the caller's sequence untouched.

    Items are normalized to ``Job`` tuples.

    Args:
        jobs: Sequence of ``(payload, due_time, processing_time)``
        zero: Starting completion time

    Returns:
        ScheduleResult with the reordered jobs and the on-time count
    """
    ordered = [Job(*job) for job in jobs]
    on_time_count = moore_hodgson(ordered, zero)
    return ScheduleResult(jobs=ordered, on_time_count=on_time_count)


def completion_times(jobs: Sequence, on_time_count: int, zero: Any = 0) -> List[Any]:
    """
    Cumulative end times of the first ``on_time_count`` jobs.

    Args:
        jobs: Jobs in execution order
        on_time_count: Length of the on-time prefix
        zero: Starting completion time

    Returns:
        End time of each prefix job, left to right
    """
    times = []
    current = zero
    for job in jobs[:on_time_count]:
        current = current + job[2]
        times.append(current)
    return times


def is_on_time_feasible(jobs: Sequence, on_time_count: int, zero: Any = 0) -> bool:
    """Check that no job in the on-time prefix finishes after its due time."""
    ends = completion_times(jobs, on_time_count, zero)
    return all(
        _less_equal(end, job[1])
        for end, job in zip(ends, jobs[:on_time_count])
    )


def calculate_scheduling_metrics(
    jobs: Sequence,
    on_time_count: int,
    zero: Any = 0
) -> dict:
    """
    Calculate metrics about the scheduling decision.

    Args:
        jobs: Jobs as reordered by ``moore_hodgson``
        on_time_count: Value returned by ``moore_hodgson``
        zero: Starting completion time

    Returns:
        Dictionary containing scheduling metrics
    """
    ends = completion_times(jobs, on_time_count, zero)
    total = len(jobs)

    return {
        "jobs_scheduled": total,
        "on_time_count": on_time_count,
        "late_count": total - on_time_count,
        "makespan": ends[-1] if ends else zero,
        "on_time_ratio": on_time_count / total if total else 0,
    }
