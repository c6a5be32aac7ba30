"""
storefront_core.services

Service layer.

Responsibilities:
- Flows that span several stores (checkout: cart + session + orders).
"""

# Package marker.
