"""
Schemas module - Request/Response schemas for API endpoints.

All schemas live in portal.schemas.schemas:
- Request schemas (what API accepts)
- Enums shared with the services (roles, stages, statuses)
"""
