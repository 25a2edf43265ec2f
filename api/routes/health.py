"""
Health check endpoints.

Provides endpoints for monitoring and load balancer health checks.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_configuration
from core.composition.descriptors import ConfigurationDescriptor
from core.logging import get_logger


logger = get_logger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict:
    """
    Basic health check.

    Returns 200 if the service is running.
    Used by load balancers and orchestration systems.
    """
    return {
        "status": "healthy",
        "service": "commerce-backend",
    }


@router.get("/ready")
async def readiness_check(
    configuration: ConfigurationDescriptor = Depends(get_configuration),
) -> dict:
    """
    Readiness check.

    Returns 200 once the backend configuration has been composed,
    together with the active modules and plugins (no option values).
    """
    return {
        "status": "ready",
        "worker_mode": configuration.project_config.worker_mode,
        "admin_disabled": configuration.admin.disable,
        "modules": {
            entry.key.value: entry.provider_ids for entry in configuration.modules
        },
        "plugins": [plugin.resolve for plugin in configuration.plugins],
    }
