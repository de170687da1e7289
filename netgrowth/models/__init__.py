"""SQLAlchemy models."""

from netgrowth.models.category import Category, contact_categories
from netgrowth.models.contact import Contact
from netgrowth.models.interaction import Interaction
from netgrowth.models.job_run import JobRun
from netgrowth.models.queue_item import QueueItem
from netgrowth.models.score_history import ScoreHistory
from netgrowth.models.scoring_config import ScoringConfigEntry
from netgrowth.models.status_history import StatusHistory
from netgrowth.models.template import Template

__all__ = [
    "Category",
    "Contact",
    "Interaction",
    "JobRun",
    "QueueItem",
    "ScoreHistory",
    "ScoringConfigEntry",
    "StatusHistory",
    "Template",
    "contact_categories",
]
