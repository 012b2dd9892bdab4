"""Persistence layer for database operations using SQLite.

This module provides the public API for database operations including:
- Database initialization and connection management
- Repository classes for candidates, preferences, jobs and embeddings
- Custom exceptions for error handling

Public API:
    # Database initialization and session management
    - init_database(database_url: str) -> None
    - get_session() -> ContextManager[Session]
    - close_database() -> None
    - get_engine() -> Engine

    # Repository classes
    - CandidateRepository: candidate profiles
    - PreferencesRepository: per-candidate search preferences
    - JobRepository: job postings
    - EmbeddingRepository: candidate and job vectors (JSON text on disk)

    # Exceptions
    - PersistenceError: Base exception for all persistence errors
    - DatabaseConnectionError: Database connection/initialization failures
    - RecordNotFoundError: Required record not found
    - DataIntegrityError: Constraint violations

Example usage:
    >>> from autosearch.persistence import init_database, get_session, JobRepository
    >>>
    >>> init_database("sqlite:///./data/autosearch.db")
    >>>
    >>> with get_session() as session:
    ...     repo = JobRepository(session)
    ...     job = repo.get_by_id("job-042")
"""

# Database initialization and session management
from .database import close_database, get_engine, get_session, init_database

# Repository classes
from .repositories import (
    CandidateRepository,
    EmbeddingRepository,
    JobRepository,
    PreferencesRepository,
)

# Exceptions
from .exceptions import (
    DatabaseConnectionError,
    DataIntegrityError,
    PersistenceError,
    RecordNotFoundError,
)

# Public API exports
__all__ = [
    # Database functions
    "init_database",
    "get_session",
    "close_database",
    "get_engine",
    # Repositories
    "CandidateRepository",
    "PreferencesRepository",
    "JobRepository",
    "EmbeddingRepository",
    # Exceptions
    "PersistenceError",
    "DatabaseConnectionError",
    "RecordNotFoundError",
    "DataIntegrityError",
]
