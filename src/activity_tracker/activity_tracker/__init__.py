"""Activity Tracker package.

Feature modules (sessions, attendance, history, reports, ...) each carry a
domain model, a repository interface with its MySQL implementation, a service
holding the business rules and a thin Flask controller.
"""
