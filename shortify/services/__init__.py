"""
Business logic of the shortify service.

- url_service: URL directory (lookup, creation, lifecycle updates)
- ownership: ownership guard for owner-only operations
- redirect_service / visit_logger / background_tasks: redirect and ingest path
- visit_store / analytics_service: visit aggregation and analytics views
- user_agent: user-agent classification
"""
