"""Client Project Portal - backend for client projects and collaborator payouts.

This package provides project creation and duplication, service selection,
invoice approval (per-project and monthly groups), collaborator assignment,
revision tracking and client notification email, exposed over a FastAPI
HTTP surface backed by an async SQLAlchemy store.
"""

__version__ = "0.1.0"
