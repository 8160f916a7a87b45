"""Core package for shared application functionality.

- **config**: Typed settings loaded from the environment and ``.env``
- **context**: Correlation ID storage for the current request
- **exceptions**: Error hierarchy with error codes and severities
- **error_context**: Redaction of passwords, tokens and credential headers
- **logging**: Loguru setup with console and JSON formatters
- **observability**: OpenTelemetry tracing
- **types**: Shared type aliases
"""
