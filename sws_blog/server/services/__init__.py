"""Service layer: business logic between the API routers and the repositories."""
