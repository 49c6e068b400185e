"""
StartupConnect — A Professional Network for the Startup Ecosystem
===================================================================
Founders, angel investors, venture capitalists and industry experts keep
role-specific profiles, connect with each other, share posts on a common
feed, gather in industry communities and message their connections.

Package layout::

    startupconnect/
    ├── config.py          # YAML → typed Python config
    ├── constants.py       # Roles, industries, stages, limits
    ├── errors.py          # Domain + store error hierarchy
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + async helper
    │   ├── models.py      # All ORM models
    │   └── seed.py        # Default communities
    ├── engine/
    │   ├── profiles.py       # Role-tagged profile variants
    │   ├── relationships.py  # Connection edge rules
    │   └── content.py        # Post / comment / message text rules
    ├── services/
    │   ├── user_service.py          # Signup, profiles, suggestions
    │   ├── relationship_service.py  # Connection lifecycle
    │   ├── engagement_service.py    # Posts, likes, comments
    │   ├── community_service.py     # Communities + membership
    │   ├── messaging_service.py     # Chats between connections
    │   └── search_service.py        # People + post search
    └── api/
        ├── main.py        # FastAPI app
        ├── deps.py        # Engine, config, JWT → acting user
        ├── error_handlers.py  # Errors → JSON envelope
        └── routes/        # REST endpoints
"""

__version__ = "0.1.0"
