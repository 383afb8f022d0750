"""Employees module — Employee model, schemas, validation and services."""

from hrms.employees.models import Employee

__all__ = ["Employee"]
