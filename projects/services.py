import logging

from django.utils import timezone

from .models import Project

logger = logging.getLogger(__name__)


def mark_project_paid(project_id: int) -> bool:
    """Flag the project as paid. Safe to repeat; never clears the flag.

    Returns True when a project row matched.
    """
    updated = Project.objects.filter(pk=project_id).update(is_paid=True, updated_at=timezone.now())
    if not updated:
        logger.warning("mark_project_paid: project %s does not exist", project_id)
    return bool(updated)
