"""
storefront_core.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Outbound HTTP request context (request ids) for log correlation.
"""

# Package marker.
