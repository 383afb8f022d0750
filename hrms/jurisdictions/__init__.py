"""Jurisdictions module — boundary assignments owned by employees."""

from hrms.jurisdictions.models import Jurisdiction

__all__ = ["Jurisdiction"]
