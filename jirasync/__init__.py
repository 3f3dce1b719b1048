"""Crashlytics to Jira issue sync service"""

__version__ = "1.0.0"
