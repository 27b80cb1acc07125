"""
Provider management and factory functions.

This module provides the main interface for creating and managing geographic
data providers. It handles provider selection based on configuration and
provides a factory function for easy provider instantiation.
"""

import logging
from typing import Dict, Optional, Type, Union

from .base import GeoProvider, ProviderType
from .errors import BadRequestError
from .settings import ProviderSettings, get_settings

logger = logging.getLogger(__name__)

# Short names accepted in addition to the ProviderType values
PROVIDER_ALIASES = {
    "ors": ProviderType.OPENROUTESERVICE,
    "googlemaps": ProviderType.GOOGLE,
}


def parse_provider_type(name: Union[str, ProviderType]) -> ProviderType:
    """
    Resolve a provider name from a request or configuration.

    Raises:
        BadRequestError: If the name matches no known provider
    """
    if isinstance(name, ProviderType):
        return name

    key = str(name).strip().lower()
    if key in PROVIDER_ALIASES:
        return PROVIDER_ALIASES[key]
    try:
        return ProviderType(key)
    except ValueError:
        available = [p.value for p in ProviderType]
        raise BadRequestError(
            f"Invalid provider '{name}'. Available providers: {', '.join(available)}"
        )


class GeoProviderManager:
    """
    Manages geographic data provider instances and configuration.

    Provider classes are registered per ProviderType; instances are built
    lazily from settings and reused. Providers hold only configuration, so
    sharing one instance between requests is safe.
    """

    def __init__(self, settings: Optional[ProviderSettings] = None):
        self._settings = settings
        self._providers: Dict[ProviderType, GeoProvider] = {}
        self._provider_classes: Dict[ProviderType, Type[GeoProvider]] = {}

    @property
    def settings(self) -> ProviderSettings:
        return self._settings or get_settings()

    def register_provider(self, provider_type: ProviderType, provider_class: Type[GeoProvider]):
        """
        Register a provider class for a given provider type.

        Args:
            provider_type: The provider type identifier
            provider_class: The provider class to register
        """
        self._provider_classes[provider_type] = provider_class
        self._providers.pop(provider_type, None)
        logger.info(f"Registered provider class for {provider_type.value}")

    @property
    def registered_types(self):
        return list(self._provider_classes.keys())

    def get_provider(self, provider_type: Optional[Union[str, ProviderType]] = None) -> GeoProvider:
        """
        Get a provider instance for the specified type.

        Args:
            provider_type: Provider type or name. If None, uses configured default.

        Returns:
            Configured provider instance

        Raises:
            BadRequestError: If the provider name is unknown or not registered
        """
        if provider_type is None:
            provider_type = self._get_default_provider_type()
        provider_type = parse_provider_type(provider_type)

        if provider_type in self._providers:
            return self._providers[provider_type]

        if provider_type not in self._provider_classes:
            raise BadRequestError(f"Provider type {provider_type.value} is not registered")

        provider_class = self._provider_classes[provider_type]
        provider_instance = provider_class.from_settings(self.settings)
        self._providers[provider_type] = provider_instance

        logger.info(f"Created new provider instance: {provider_type.value}")
        return provider_instance

    def _get_default_provider_type(self) -> ProviderType:
        """Default provider type from the GEO_PRIMARY_PROVIDER setting."""
        return parse_provider_type(self.settings.geo_primary_provider)


# Global provider manager instance
_global_manager: Optional[GeoProviderManager] = None


def get_manager() -> GeoProviderManager:
    """
    Get the global provider manager instance.

    Returns:
        Global GeoProviderManager instance
    """
    global _global_manager
    if _global_manager is None:
        _global_manager = GeoProviderManager()
        _register_built_in_providers(_global_manager)
    return _global_manager


def reset_manager() -> None:
    """Drop the global manager so the next call rebuilds it from settings."""
    global _global_manager
    _global_manager = None


def create_provider(provider_type: Optional[Union[str, ProviderType]] = None) -> GeoProvider:
    """
    Factory function to create a geographic data provider.

    This is the main entry point for getting a provider instance.
    It uses the global manager and automatically selects the provider
    based on environment configuration.

    Args:
        provider_type: Specific provider type or name. If None, uses default.

    Returns:
        Configured provider instance ready for use

    Example:
        ```python
        # Use default provider (from GEO_PRIMARY_PROVIDER env var)
        provider = create_provider()

        # Use specific provider
        provider = create_provider(ProviderType.OPENROUTESERVICE)

        route = await provider.compute_route(coords, TravelProfile.FOOT_WALKING)
        ```
    """
    return get_manager().get_provider(provider_type)


def _register_built_in_providers(manager: GeoProviderManager):
    """
    Register all built-in provider classes.

    Args:
        manager: Manager instance to register providers with
    """
    # Import providers here to avoid circular imports
    from .google.provider import GoogleMapsProvider
    from .ors.provider import OpenRouteServiceProvider

    manager.register_provider(ProviderType.OPENROUTESERVICE, OpenRouteServiceProvider)
    manager.register_provider(ProviderType.GOOGLE, GoogleMapsProvider)

    logger.info("Finished registering built-in providers")
