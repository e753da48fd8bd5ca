"""
Marketplace Admin Console
Admin backend for a marketplace connecting companies with L&D professionals.

Architecture:
- PostgreSQL: Structured data (users, profiles, postings, content, billing)
- MongoDB: Admin activity documents (audit trail, dashboard feed)
"""

__version__ = "1.0.0"
