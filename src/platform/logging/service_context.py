"""
Service context for log lines.

Identifies the process emitting a log line so logs from several workers
(API replicas, the hold sweeper) can be told apart.
"""

import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'coach_booking')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')
    # Container hostnames are unique per replica; fall back to the PID locally
    instance = os.getenv('HOSTNAME', '')[:12] or str(os.getpid())
    return f'{service_name}@{deploy_env}:{instance}'
