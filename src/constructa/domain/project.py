"""Project domain service."""

import logging
from datetime import date
from typing import Optional

from constructa.database.base import Database
from constructa.domain.entities import (
    DistributionType,
    Project as ProjectEntity,
    ProjectStatus,
)
from constructa.domain.errors import (
    NotFoundError,
    ValidationError,
    no_project,
    project_not_found,
)

logger = logging.getLogger(__name__)


class ProjectService:
    """Service for managing construction projects."""

    def __init__(self, db: Database):
        """Initialize project service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_project(
        self,
        name: str,
        address: str = "",
        start_date: Optional[date] = None,
        distribution_type: DistributionType = DistributionType.PERCENTAGE,
    ) -> int:
        """Create a new project.

        New projects start ACTIVE.

        Args:
            name: Display name
            address: Site address
            start_date: Start date (defaults to today)
            distribution_type: Cost-sharing policy

        Returns:
            Project ID

        Raises:
            ValidationError: If name is empty
        """
        if not name or not name.strip():
            raise ValidationError("Project name cannot be empty")

        project_id = self.db.create_project(
            name=name.strip(),
            address=address,
            start_date=start_date or date.today(),
            status=ProjectStatus.ACTIVE,
            distribution_type=DistributionType(distribution_type),
        )
        logger.info("Created project %s (%s)", project_id, name)
        return project_id

    def get_project(self, project_id: int) -> Optional[ProjectEntity]:
        """Get project by ID, or None if not found."""
        return self.db.get_project(project_id)

    def require_project(self, project_id: int) -> ProjectEntity:
        """Get project by ID.

        Raises:
            NotFoundError: If project doesn't exist
        """
        project = self.db.get_project(project_id)
        if project is None:
            raise NotFoundError(project_not_found(project_id))
        return project

    def current_project(self) -> ProjectEntity:
        """Return the workspace project (the oldest one).

        Raises:
            NotFoundError: If no project was created yet
        """
        projects = self.db.list_projects()
        if not projects:
            raise NotFoundError(no_project())
        return projects[0]

    def update_settings(
        self,
        project_id: int,
        name: Optional[str] = None,
        address: Optional[str] = None,
        start_date: Optional[date] = None,
        status: Optional[ProjectStatus] = None,
        distribution_type: Optional[DistributionType] = None,
    ) -> None:
        """Update project settings.

        Changing the distribution policy changes every partner's fair share
        on the next read.

        Raises:
            NotFoundError: If project doesn't exist
            ValidationError: If name is empty
        """
        self.require_project(project_id)
        if name is not None and not name.strip():
            raise ValidationError("Project name cannot be empty")

        self.db.update_project(
            project_id,
            name=name.strip() if name is not None else None,
            address=address,
            start_date=start_date,
            status=ProjectStatus(status) if status is not None else None,
            distribution_type=(
                DistributionType(distribution_type)
                if distribution_type is not None
                else None
            ),
        )
        logger.info("Updated settings of project %s", project_id)
