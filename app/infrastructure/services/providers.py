"""Process-wide providers for settings, sessions and the command service.

Each provider is memoised with lru_cache so every caller shares one instance;
tests reset them with ``provider.cache_clear()``.
"""

from functools import lru_cache

from infrastructure.commands.config import DispatchConfig
from infrastructure.commands.service import CommandService
from infrastructure.configuration import Settings
from infrastructure.persistence import create_kv_store
from infrastructure.resilience.retry import RetryConfig
from infrastructure.security import SessionManager, TokenManager, resolve_secret_key
from infrastructure.services.plugins import discover_and_register_handlers


@lru_cache
def get_settings() -> Settings:
    """Settings loaded once from the environment and .env file.

    Route handlers receive it through ``SettingsDep`` so tests can override it.
    """
    return Settings()


@lru_cache
def get_signing_key() -> str:
    """
    Get the application-scoped signing key shared by tokens and sessions.

    Returns:
        str: Configured key, or an ephemeral key generated once per process.
    """
    return resolve_secret_key(get_settings())


@lru_cache
def get_session_manager() -> SessionManager:
    """
    Get application-scoped session manager singleton.

    Returns:
        SessionManager: Resolves HTTP session tokens into actors.
    """
    settings = get_settings()
    return SessionManager(
        secret_key=get_signing_key(),
        ttl_seconds=settings.security.session_ttl_seconds,
    )


@lru_cache
def get_command_service() -> CommandService:
    """
    Get application-scoped command service singleton.

    Builds the command core from settings, lets every feature package register
    its handlers, then seals the registry.

    Returns:
        CommandService: Cached, fully registered command service.

    Usage:
        @router.post("/commands/{action}")
        def dispatch(action: str, service: CommandServiceDep, ...):
            return service.dispatch(action, payload, token, actor).to_dict()
    """
    settings = get_settings()
    kv_store = create_kv_store(settings)
    service = CommandService(
        kv_store=kv_store,
        tokens=TokenManager(
            secret_key=get_signing_key(),
            ttl_seconds=settings.security.token_ttl_seconds,
            namespace_prefix=settings.security.token_namespace_prefix,
        ),
        dispatch_config=DispatchConfig.from_settings(settings),
        retry_config=RetryConfig.from_settings(settings),
    )
    discover_and_register_handlers(service.registry, kv_store, settings)
    service.registry.seal()
    return service
