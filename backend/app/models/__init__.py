"""Database models mirroring the automation platform's tables."""

from .credential import Credential
from .execution import Execution
from .tag import Tag
from .workflow import Workflow, workflows_tags

__all__ = ["Credential", "Execution", "Tag", "Workflow", "workflows_tags"]
