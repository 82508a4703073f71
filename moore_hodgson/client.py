"""
Async client for the scheduler HTTP server.
"""

import asyncio
import logging
from typing import Iterable

import aiohttp

from .types import Job, ScheduleResponse

logger = logging.getLogger(__name__)


class SchedulerClientError(Exception):
    """Raised when the server rejects a scheduling request."""

    def __init__(self, status: int, message: str):
        super().__init__(f"Scheduler returned {status}: {message}")
        self.status = status
        self.message = message


def _job_from_dict(data: dict) -> Job:
    return Job(data.get('payload'), data['due_time'], data['processing_time'])


class ScheduleClient:
    def __init__(self, base_url="http://localhost:8001"):
        self.base_url = base_url.rstrip('/')

    async def health_check(self) -> bool:
        """Check if the server is healthy"""
        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(f"{self.base_url}/health") as resp:
                    if resp.status == 200:
                        data = await resp.json()
                        logger.info(f"Scheduler health: {data}")
                        return True
                    logger.error(f"Health check returned {resp.status}")
        except aiohttp.ClientError as e:
            logger.error(f"Health check failed: {e}")
        return False

    async def wait_until_healthy(self, attempts: int = 10, delay: float = 0.5) -> bool:
        """Poll the health endpoint until it answers or attempts run out"""
        for attempt in range(attempts):
            if await self.health_check():
                return True
            if attempt + 1 < attempts:
                await asyncio.sleep(delay)
        return False

    async def schedule(self, jobs: Iterable) -> ScheduleResponse:
        """
        Send jobs to the server and return its decision.

        Args:
            jobs: ``(payload, due_time, processing_time)`` triples

        Raises:
            SchedulerClientError: If the server does not answer with 200
        """
        body = {
            'type': 'schedule_request',
            'jobs': [
                {'payload': job[0], 'due_time': job[1], 'processing_time': job[2]}
                for job in jobs
            ]
        }

        async with aiohttp.ClientSession() as session:
            async with session.post(f"{self.base_url}/schedule", json=body) as resp:
                data = await resp.json()
                if resp.status != 200:
                    logger.error(f"Schedule request failed: {data}")
                    raise SchedulerClientError(resp.status, data.get('error', ''))

        return ScheduleResponse(
            on_time_count=data['on_time_count'],
            on_time_jobs=[_job_from_dict(j) for j in data['on_time_jobs']],
            late_jobs=[_job_from_dict(j) for j in data['late_jobs']],
            completion_times=data.get('completion_times'),
            metrics=data.get('metrics', {})
        )

    def run(self, jobs: Iterable) -> ScheduleResponse:
        """Schedule jobs from synchronous code"""
        return asyncio.run(self.schedule(jobs))
