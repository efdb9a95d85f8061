"""Registry and factory for rate providers, keyed by rate source name."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable, List

from .base import BaseRateProvider, DateSupport, ProviderError

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[Mapping[str, Any]], BaseRateProvider]

PROVIDERS_EXT_KEY = "rate_providers"

_PROVIDER_FACTORIES: Dict[str, ProviderFactory] = {}


def _default_factories() -> Iterable[tuple[str, ProviderFactory]]:
    from .oxr_provider import OpenExchangeRatesProvider
    from .visa_provider import VisaProvider

    return [
        (OpenExchangeRatesProvider.name, OpenExchangeRatesProvider.from_config),
        (VisaProvider.name, VisaProvider.from_config),
    ]


def _mock_factories() -> Iterable[tuple[str, ProviderFactory]]:
    from .mock import MockRateProvider
    from .oxr_provider import OpenExchangeRatesProvider
    from .visa_provider import VisaProvider

    def oxr_factory(config: Mapping[str, Any]) -> BaseRateProvider:
        return MockRateProvider(OpenExchangeRatesProvider.name, DateSupport.ANY_DATE, "1.30")

    def visa_factory(config: Mapping[str, Any]) -> BaseRateProvider:
        date_support = DateSupport(str(config.get("VISA_DATE_SUPPORT", "any_date")))
        return MockRateProvider(VisaProvider.name, date_support, "1.32")

    return [
        (OpenExchangeRatesProvider.name, oxr_factory),
        (VisaProvider.name, visa_factory),
    ]


def register_provider(name: str, factory: ProviderFactory) -> None:
    """Register a provider factory under the given source name."""

    if not name:
        raise ValueError("Provider name cannot be empty.")
    _PROVIDER_FACTORIES[name.lower()] = factory


def unregister_provider(name: str) -> None:
    """Remove a provider factory; primarily for testing."""

    _PROVIDER_FACTORIES.pop(name.lower(), None)


def list_providers() -> List[str]:
    """Return the list of registered source names."""

    return sorted(_PROVIDER_FACTORIES.keys())


def get_provider(name: str, config: Mapping[str, Any]) -> BaseRateProvider:
    """Instantiate the provider registered for ``name`` from ``config``."""

    provider_name = (name or "").lower()
    try:
        factory = _PROVIDER_FACTORIES[provider_name]
    except KeyError as exc:
        available = ", ".join(list_providers()) or "none registered"
        raise ProviderError(
            f"Unknown provider '{provider_name}'. Available providers: {available}"
        ) from exc
    return factory(config)


def build_providers(config: Mapping[str, Any]) -> Dict[str, BaseRateProvider]:
    """Instantiate every registered provider, keyed by source name."""

    return {name: get_provider(name, config) for name in list_providers()}


def init_providers(app) -> Dict[str, BaseRateProvider]:
    """Attach one provider per rate source to the Flask app."""

    if app.config.get("RATE_PROVIDERS_MOCK"):
        logger.info("Using mock rate providers.")
        providers = {name: factory(app.config) for name, factory in _mock_factories()}
    else:
        providers = build_providers(app.config)
    app.extensions[PROVIDERS_EXT_KEY] = providers
    return providers


def reset_registry(default_factories: Iterable[tuple[str, ProviderFactory]] | None = None) -> None:
    """Reset provider registry; useful for tests."""

    _PROVIDER_FACTORIES.clear()

    factories = default_factories or _default_factories()
    for name, factory in factories:
        register_provider(name, factory)


reset_registry()
