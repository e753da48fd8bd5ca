"""
Schemas module - Request/Response schemas for the admin API.

Everything lives in admin_console.schemas.schemas.
"""
