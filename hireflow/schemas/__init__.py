"""
Schemas module - Request/Response schemas for API endpoints.

Schemas are the API contract (what the client sends/receives);
stored documents are plain dicts handled by hireflow.services.mongo_service.
"""
