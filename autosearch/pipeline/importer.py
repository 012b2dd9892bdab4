"""Load candidates, preferences and jobs from a YAML seed file."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import BaseModel, ValidationError

from autosearch.config.exceptions import ConfigurationError
from autosearch.domain.models import CandidateProfile, JobPosting, SearchPreferences
from autosearch.logging import get_logger
from autosearch.persistence.database import get_session
from autosearch.persistence.repositories import (
    CandidateRepository,
    JobRepository,
    PreferencesRepository,
)

from .models import ImportResult

logger = get_logger(__name__, component="import")

SEED_SECTIONS = {
    "candidates": CandidateProfile,
    "preferences": SearchPreferences,
    "jobs": JobPosting,
}


@dataclass
class SeedData:
    """Validated content of a seed file."""

    candidates: List[CandidateProfile] = field(default_factory=list)
    preferences: List[SearchPreferences] = field(default_factory=list)
    jobs: List[JobPosting] = field(default_factory=list)


def parse_seed_data(raw: Dict[str, Any]) -> SeedData:
    """
    Validate the sections of a seed mapping.

    Every problem across all sections is collected before raising.

    Raises:
        ConfigurationError: If a section is not a list or an entry is invalid
    """
    unknown = sorted(set(raw) - set(SEED_SECTIONS))
    errors = [f"Unknown section: {name}" for name in unknown]
    parsed: Dict[str, List[BaseModel]] = {}

    for section, model_cls in SEED_SECTIONS.items():
        entries = raw.get(section) or []
        if not isinstance(entries, list):
            errors.append(f"{section}: expected a list of entries")
            continue

        parsed[section] = []
        for position, entry in enumerate(entries):
            try:
                parsed[section].append(model_cls.model_validate(entry))
            except ValidationError as e:
                errors.extend(
                    ConfigurationError.from_validation_error(
                        "", e, prefix=f"{section} -> {position}"
                    ).errors
                )

    if errors:
        raise ConfigurationError(
            "Seed file validation failed",
            errors=errors,
            suggestions=["Review tests/fixtures/seed.yaml for the expected format"],
        )

    return SeedData(**parsed)


def load_seed_file(path: Path) -> SeedData:
    """
    Read and validate a YAML seed file.

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    try:
        with open(path, "r") as f:
            raw = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Seed file not found: {path}")
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse YAML seed file: {e}",
            suggestions=["Check YAML syntax in the seed file"],
        )
    except OSError as e:
        raise ConfigurationError(f"Failed to read seed file: {e}")

    if raw is None:
        return SeedData()
    if not isinstance(raw, dict):
        raise ConfigurationError("Seed file must contain a mapping at the top level")

    return parse_seed_data(raw)


def import_seed_data(data: SeedData) -> ImportResult:
    """
    Upsert seed records in one transaction.

    Candidates are written before preferences so preference rows always
    reference an existing profile.
    """
    with get_session() as session:
        candidates = CandidateRepository(session)
        for profile in data.candidates:
            candidates.upsert(profile)

        preferences = PreferencesRepository(session)
        for prefs in data.preferences:
            preferences.upsert(prefs)

        JobRepository(session).bulk_upsert(data.jobs)

    result = ImportResult(
        candidates=len(data.candidates),
        preferences=len(data.preferences),
        jobs=len(data.jobs),
    )
    logger.info(
        f"Imported {result.candidates} candidates, {result.preferences} preferences "
        f"and {result.jobs} jobs",
        extra={
            "event": "import.completed",
            "candidates": result.candidates,
            "preferences": result.preferences,
            "jobs": result.jobs,
        },
    )
    return result
