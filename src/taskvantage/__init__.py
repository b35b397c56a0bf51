"""TaskVantage task, project and team management core.

Keeps canonical collections of tasks, projects and team members, recomputes
project metrics, member stats and insights after every mutation, and persists
the collections to a local key-value store.
"""

__version__ = "0.1.0"
