"""
Reconcile Service - combines the current dataset with an imported one.

REPLACE substitutes the imported data, falling back to defaults for anything
it leaves out. MERGE only adds projects and app sessions whose identity is
not known yet; existing entries always win.

Every function here returns a new Dataset and never touches its inputs, so a
failed import cannot leave half-applied changes behind.
"""

import logging
from typing import Any, Dict, List, Mapping, Type

from pydantic import BaseModel, TypeAdapter, ValidationError

from pomofocus.domain.errors import FormatError
from pomofocus.domain.models import AppSession, Dataset, ImportMode, Project, Stats, TimerSettings

logger = logging.getLogger(__name__)

# Given to imported projects that carry no name
UNTITLED_PROJECT_NAME = "Untitled project"

_projects_adapter = TypeAdapter(List[Project])
_sessions_adapter = TypeAdapter(List[AppSession])


def _lookup(payload: Mapping, model: Type[BaseModel], field: str) -> Any:
    """Value of a field given under its JSON alias or its Python name"""
    alias = model.model_fields[field].alias or field
    if alias in payload:
        return payload[alias]
    return payload.get(field)


def validate_payload(incoming: Any) -> None:
    """
    Check the minimum shape of an import: an object with a projects list.

    Raises:
        FormatError: if the shape is wrong
    """
    if not isinstance(incoming, Mapping):
        raise FormatError("Invalid data format: expected an object")
    if not isinstance(incoming.get("projects"), list):
        raise FormatError("Invalid data format: missing projects array")


def _records(records: Any, section: str) -> List[Mapping]:
    """A list section of the payload, checked to hold only objects"""
    if records is None:
        return []
    if not isinstance(records, list):
        raise FormatError(f"Invalid data format: {section} must be an array")
    for index, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise FormatError(f"Invalid data format: {section}[{index}] must be an object")
    return records


def _named(record: Mapping) -> Dict[str, Any]:
    """Copy of a project record with a fallback name when it has none"""
    record = dict(record)
    if record.get("name") is None:
        record["name"] = UNTITLED_PROJECT_NAME
    return record


def _overlay(model: Type[BaseModel], base: BaseModel, partial: Any, section: str) -> BaseModel:
    """Validate base overlaid key-by-key with a partial mapping"""
    if partial is None:
        return base.model_copy()
    if not isinstance(partial, Mapping):
        raise FormatError(f"Invalid data format: {section} must be an object")

    values: Dict[str, Any] = base.model_dump()
    for field in model.model_fields:
        value = _lookup(partial, model, field)
        if value is not None:
            values[field] = value
    try:
        return model.model_validate(values)
    except ValidationError as e:
        raise FormatError(f"Invalid {section}: {e}") from e


def replace_dataset(incoming: Mapping) -> Dataset:
    """
    Build a dataset from an import, using defaults for missing parts.

    settings and stats are merged with the defaults key by key; projects and
    appSessions are taken as a whole.
    """
    validate_payload(incoming)
    defaults = Dataset()

    settings = _overlay(TimerSettings, defaults.settings,
                        _lookup(incoming, Dataset, "settings"), "settings")
    stats = _overlay(Stats, defaults.stats,
                     _lookup(incoming, Dataset, "stats"), "stats")

    project_records = [_named(r) for r in _records(incoming["projects"], "projects")]
    session_records = _records(_lookup(incoming, Dataset, "app_sessions"), "appSessions")
    try:
        return Dataset(
            projects=_projects_adapter.validate_python(project_records),
            settings=settings,
            stats=stats,
            app_sessions=_sessions_adapter.validate_python(session_records),
        )
    except ValidationError as e:
        raise FormatError(f"Invalid data format: {e}") from e


def merge_datasets(current: Dataset, incoming: Mapping) -> Dataset:
    """
    Add imported projects and app sessions that are not present yet.

    Projects are matched by id and app sessions by date. Records matching an
    existing entry are dropped before validation, so only the entries that
    get appended have to be complete. Imported durations are never added
    onto existing ones.
    """
    validate_payload(incoming)

    known_ids = {p.id for p in current.projects}
    new_projects: List[Dict[str, Any]] = []
    for record in _records(incoming["projects"], "projects"):
        project_id = record.get("id")
        if project_id is not None and project_id in known_ids:
            logger.debug("Skipping imported project %s: id already present", project_id)
            continue
        new_projects.append(_named(record))
        if project_id is not None:
            known_ids.add(project_id)

    known_dates = {s.date for s in current.app_sessions}
    new_sessions: List[Mapping] = []
    for record in _records(_lookup(incoming, Dataset, "app_sessions"), "appSessions"):
        date = record.get("date")
        if date is not None and date in known_dates:
            continue
        new_sessions.append(record)
        if date is not None:
            known_dates.add(date)

    try:
        projects = _projects_adapter.validate_python(new_projects)
        app_sessions = _sessions_adapter.validate_python(new_sessions)
    except ValidationError as e:
        raise FormatError(f"Invalid data format: {e}") from e

    result = current.model_copy(deep=True)
    result.projects.extend(projects)
    result.app_sessions.extend(app_sessions)
    return result


def reconcile(current: Dataset, incoming: Any, mode: ImportMode) -> Dataset:
    """
    Combine current and incoming data according to mode.

    Raises:
        FormatError: if incoming is malformed (current is never modified)
    """
    mode = ImportMode(mode)
    if mode is ImportMode.REPLACE:
        result = replace_dataset(incoming)
    elif mode is ImportMode.MERGE:
        result = merge_datasets(current, incoming)
    else:
        raise ValueError(f"Unknown import mode: {mode!r}")

    logger.info("Import (%s): %d projects, %d app sessions",
                mode.value, len(result.projects), len(result.app_sessions))
    return result
