"""
Shared utilities for the SSO provider services.

Common building blocks consumed by the service packages:

- config: Service configuration via pydantic-settings
- logging: Structured logging with request correlation
- errors: Canonical error types and responses
- base_service: FastAPI service skeleton (health, error handlers)

Do not import from service_* packages into shared/.
"""
