"""
HTTP API server for the Moore-Hodgson scheduler.

This module provides a Flask-based REST API that receives jobs with due
times and processing times, and returns which of them can be finished on
time and in what order.
"""

from flask import Flask, request, jsonify
from datetime import datetime, timezone
from numbers import Real
from typing import Dict, Any, Mapping
import logging

from . import __version__
from .types import Job, ScheduleRequest, ScheduleResponse, SchedulingPolicy
from .algorithm import schedule, completion_times, calculate_scheduling_metrics


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='[%(asctime)s] %(levelname)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

ENV_PREFIX = 'MOORE_HODGSON'


def parse_time(name: str, value: Any) -> Real:
    """
    Validate a due time or processing time taken from a request.

    Args:
        name: Field name, used in error messages
        value: Decoded JSON value

    Returns:
        The value, unchanged

    Raises:
        ValueError: If the value is not a number
    """
    # bool is a subclass of int
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ValueError(f"{name} must be a number, got {value!r}")
    return value


def parse_job(job_data: Mapping[str, Any]) -> Job:
    """
    Build a Job from its JSON representation.

    Raises:
        KeyError: If due_time or processing_time is missing
        ValueError: If a time is not a number
    """
    if not isinstance(job_data, Mapping):
        raise ValueError(f"job must be an object, got {job_data!r}")
    return Job(
        payload=job_data.get('payload'),
        due_time=parse_time('due_time', job_data['due_time']),
        processing_time=parse_time('processing_time', job_data['processing_time'])
    )


def job_to_dict(job: Job) -> Dict[str, Any]:
    return {
        'payload': job.payload,
        'due_time': job.due_time,
        'processing_time': job.processing_time
    }


def build_response(schedule_request: ScheduleRequest, policy: SchedulingPolicy) -> ScheduleResponse:
    """Run the scheduler on parsed jobs and assemble the response."""
    result = schedule(schedule_request.jobs)
    metrics = calculate_scheduling_metrics(result.jobs, result.on_time_count)

    times = None
    if policy.include_completion_times:
        times = completion_times(result.jobs, result.on_time_count)

    return ScheduleResponse(
        on_time_count=result.on_time_count,
        on_time_jobs=result.on_time_jobs,
        late_jobs=result.late_jobs,
        completion_times=times,
        metrics=metrics
    )


def create_app(config: Dict[str, Any] = None) -> Flask:
    """
    Create and configure the Flask application.

    Configuration is read from the defaults below, then from environment
    variables prefixed with ``MOORE_HODGSON_``, then from ``config``.

    Args:
        config: Optional configuration dictionary

    Returns:
        Configured Flask app
    """
    app = Flask(__name__)

    # Default configuration
    app.config.update({
        'TESTING': False,
        'MAX_JOBS': 10000,
        'INCLUDE_COMPLETION_TIMES': True,
    })

    app.config.from_prefixed_env(ENV_PREFIX)

    # Apply custom config
    if config:
        app.config.update(config)

    policy = SchedulingPolicy(
        max_jobs=app.config['MAX_JOBS'],
        include_completion_times=app.config['INCLUDE_COMPLETION_TIMES']
    )

    @app.route('/health', methods=['GET'])
    def health():
        """Health check endpoint."""
        return jsonify({
            'status': 'healthy',
            'service': 'moore-hodgson-scheduler',
            'version': __version__,
            'timestamp': datetime.now(timezone.utc).isoformat()
        })

    @app.route('/schedule', methods=['POST'])
    def schedule_jobs():
        """
        Select the jobs that can finish on time.

        Request body:
        {
            "type": "schedule_request",
            "jobs": [
                {"payload": "ApplyForJob", "due_time": 6, "processing_time": 5}
            ]
        }

        Response:
        {
            "type": "schedule_response",
            "on_time_count": 1,
            "on_time_jobs": [
                {"payload": "ApplyForJob", "due_time": 6, "processing_time": 5}
            ],
            "late_jobs": [],
            "completion_times": [5],
            "metrics": {...}
        }
        """
        try:
            data = request.get_json(silent=True)

            if not data:
                return jsonify({'error': 'Empty request body'}), 400

            jobs_data = data.get('jobs', []) if isinstance(data, dict) else None
            if not isinstance(jobs_data, list):
                return jsonify({'error': 'jobs must be a list'}), 400

            if len(jobs_data) > policy.max_jobs:
                logger.error(f"Rejected request with {len(jobs_data)} jobs")
                return jsonify({
                    'error': f'Too many jobs: {len(jobs_data)} > {policy.max_jobs}'
                }), 400

            # Parse jobs
            jobs = []
            for job_data in jobs_data:
                try:
                    jobs.append(parse_job(job_data))
                except (KeyError, ValueError) as e:
                    logger.error(f"Invalid job data: {e}")
                    return jsonify({'error': f'Invalid job data: {e}'}), 400

            result = build_response(ScheduleRequest(jobs=jobs), policy)

            logger.info(f"Scheduled {result.on_time_count} of {len(jobs)} jobs on time")
            logger.info(f"Metrics: {result.metrics}")

            # Build response
            response = {
                'type': 'schedule_response',
                'on_time_count': result.on_time_count,
                'on_time_jobs': [job_to_dict(j) for j in result.on_time_jobs],
                'late_jobs': [job_to_dict(j) for j in result.late_jobs],
                'metrics': result.metrics
            }
            if result.completion_times is not None:
                response['completion_times'] = result.completion_times

            return jsonify(response), 200

        except Exception as e:
            logger.error(f"Error scheduling jobs: {e}", exc_info=True)
            return jsonify({'error': str(e)}), 500

    @app.route('/policy', methods=['GET'])
    def get_policy():
        """Get current scheduling policy."""
        return jsonify({
            'max_jobs': policy.max_jobs,
            'include_completion_times': policy.include_completion_times
        })

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 errors."""
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        logger.error(f"Internal server error: {error}")
        return jsonify({'error': 'Internal server error'}), 500

    return app


def run_server(host: str = '0.0.0.0', port: int = 8001, debug: bool = False):
    """
    Run the scheduler HTTP server.

    Args:
        host: Host to bind to
        port: Port to listen on
        debug: Enable debug mode
    """
    logger.info("=" * 50)
    logger.info("  Moore-Hodgson Scheduler Server")
    logger.info("=" * 50)
    logger.info("")
    logger.info(f"Starting server on {host}:{port}")
    logger.info("")
    logger.info("Endpoints:")
    logger.info(f"  POST {host}:{port}/schedule - Schedule jobs")
    logger.info(f"  GET  {host}:{port}/health   - Health check")
    logger.info(f"  GET  {host}:{port}/policy   - Get policy")
    logger.info("")

    app = create_app()
    app.run(host=host, port=port, debug=debug)


if __name__ == '__main__':
    run_server()
