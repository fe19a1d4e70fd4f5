"""
I/O models for API requests and responses.

This package contains Pydantic-based I/O schemas that define the contract
between API endpoints and clients. These models are separate from database
entities to allow independent evolution of API contracts.

Modules:
- blog: Posts, authors, categories, tags and listings
- live_chat: Conversations, messages, typing and realtime events
- ai_content: AI content assist request and structured output
- booking: Scheduling proxy
- submissions: Contact, newsletter and enquiry forms
"""
