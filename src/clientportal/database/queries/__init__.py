"""Database query functions for the client portal.

This module provides async query functions for all database entities:
- Project create, lookup, listing filters and mutation application
- Monthly invoice group updates
- Collaborator and catalog service lookup
- Briefing and briefing image copy
"""

from clientportal.database.queries.briefing import (
    copy_briefing,
    create_briefing,
    create_briefing_image,
    get_briefing,
    list_briefing_images,
)
from clientportal.database.queries.collaborator import (
    create_collaborator,
    create_service,
    get_collaborator,
    get_service,
    list_collaborators,
)
from clientportal.database.queries.project import (
    apply_invoice_decision_to_group,
    apply_update,
    count_projects,
    create_project,
    get_project,
    list_approved_invoice_projects,
    list_monthly_invoice_projects,
    list_projects,
    list_projects_for_client,
    list_projects_in_monthly_invoice,
    list_simple_projects,
)

__all__ = [
    # Project queries
    "create_project",
    "get_project",
    "list_projects",
    "list_projects_for_client",
    "list_simple_projects",
    "list_monthly_invoice_projects",
    "list_approved_invoice_projects",
    "list_projects_in_monthly_invoice",
    "apply_update",
    "apply_invoice_decision_to_group",
    "count_projects",
    # Collaborator and service queries
    "create_collaborator",
    "get_collaborator",
    "list_collaborators",
    "create_service",
    "get_service",
    # Briefing queries
    "get_briefing",
    "list_briefing_images",
    "create_briefing",
    "create_briefing_image",
    "copy_briefing",
]
