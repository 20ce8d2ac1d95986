# paper_latest/core/resolve.py
from __future__ import annotations
import logging

from .errors import ApiError, ResolutionError
from .models import ProjectMetadata

logger = logging.getLogger(__name__)

def resolve_version(client, project: ProjectMetadata, token: str) -> str:
    """
    Turn a user token into a concrete version.

    - version group -> newest member, in the order the API lists them
    - literal version -> itself
    A token that is both a group and a version resolves as the group.
    """
    # 1) group first; a failed or empty group falls through to the literal check
    if token in project.version_groups:
        try:
            group = client.fetch_version_group(project.project_id, token)
        except ApiError as e:
            logger.warning("Failed to get version group data for %s: %s", token, e)
        else:
            if group.newest is not None:
                logger.debug("Version group %s -> %s", token, group.newest)
                return group.newest
            logger.debug("Version group %s is empty", token)

    # 2) literal version
    if token in project.versions:
        return token

    raise ResolutionError(f"{token} is not a known version or (part of a) version group")
