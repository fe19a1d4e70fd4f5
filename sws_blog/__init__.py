"""sws-blog.

Backend of the Solve with Software marketing site: the public blog API, the
admin content API, public forms, AI content assist, live chat with realtime
updates and new-chat notifications, and the Calendly booking proxy.

Subpackages
-----------

- ``sws_blog.core``: logging, monitoring, domain errors, the database layer
  (entities and repositories) and the request/response models.
- ``sws_blog.server``: the FastAPI application, its routers, services and
  middleware.

Run the server with::

    uvicorn sws_blog.server.main:app
"""

__version__ = "0.1.0"
