"""Exceptions raised by daylog collaborators."""


class DaylogError(Exception):
    """Base class for daylog failures"""


class TrackerError(DaylogError):
    """Jira request failed or returned something unusable"""


class GitHistoryError(DaylogError):
    """Scanning the local git history failed"""
