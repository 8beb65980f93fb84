# Durable storage for run state
from .state_store import LeadStateStore

__all__ = ["LeadStateStore"]
