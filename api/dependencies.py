"""
FastAPI dependencies for dependency injection.

The configuration descriptor is composed once in the app lifespan and
kept on `app.state`; route handlers receive it read-only through here.
"""

from fastapi import Request

from core.composition.descriptors import ConfigurationDescriptor


async def get_configuration(request: Request) -> ConfigurationDescriptor:
    """
    Dependency that provides the composed backend configuration.

    Usage:
        @router.get("/ready")
        async def ready(
            configuration: ConfigurationDescriptor = Depends(get_configuration)
        ):
            ...
    """
    configuration = getattr(request.app.state, "configuration", None)
    if configuration is None:
        raise RuntimeError("Configuration not initialized")
    return configuration
