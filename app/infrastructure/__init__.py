"""Infrastructure modules for the admin styler command service.

Centralized infrastructure components:
- configuration: Settings management (Settings, RetrySettings, DispatchSettings)
- logging: Structured logging (get_module_logger, logger)
- operations: Operation results returned by store backends
- persistence: Shared key-value store (memory, Redis)
- security: Anti-forgery tokens, sessions and the Actor model
- commands: Handler registry, admission gate, dispatcher, command service
- resilience: Retry ticket queue and processor
- models: Response envelopes
- services: Dependency injection providers and feature plugin discovery
"""
