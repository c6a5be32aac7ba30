"""
storefront_core.auth

Authentication/session package.

Responsibilities:
- Principal models for admin users and customers.
- Admin/customer endpoint profiles.
- Session store owning the authenticated principal and its lifecycle.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The same `SessionStore` serves the dashboard and the storefront; only the profile differs.
