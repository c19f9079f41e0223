"""
Dependency injection for FastAPI routes.

Provides injectable dependencies for:
- Configuration
- The metadata provider and its API client
"""

from typing import Optional

from fastapi import Depends

from opendouban.config import Settings, get_settings


# =============================================================================
# Service Dependencies (Lazy Loading)
# =============================================================================

class ServiceContainer:
    """
    Container for lazy-loaded service instances.

    One provider (and so one HTTP connection pool) is shared by all requests.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._provider = None

    @property
    def provider(self):
        """Get metadata provider instance."""
        if self._provider is None:
            from ..identification.service import MovieMetadataProvider
            self._provider = MovieMetadataProvider.from_settings(self.settings)
        return self._provider

    async def close(self) -> None:
        """Release the provider's HTTP client."""
        if self._provider is not None:
            await self._provider.close()
            self._provider = None


# Global service container
_service_container: Optional[ServiceContainer] = None


def init_services(settings: Settings) -> ServiceContainer:
    """Initialize service container."""
    global _service_container
    _service_container = ServiceContainer(settings)
    return _service_container


def get_service_container() -> ServiceContainer:
    """Get service container instance."""
    if _service_container is None:
        # Auto-initialize with default settings if not explicitly initialized
        return init_services(get_settings())
    return _service_container


# =============================================================================
# Individual Service Dependencies
# =============================================================================

def get_provider(
    container: ServiceContainer = Depends(get_service_container),
):
    """Dependency for the metadata provider."""
    return container.provider

