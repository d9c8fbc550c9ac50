"""Scheduled generation of attendee and waiting lists."""
import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from roster.core.config import settings
from roster.lists.ranking import (
    InvalidEventConfig,
    Participant,
    PartitionResult,
    partition,
    validate_spots,
)
from roster.lists.store import RecordStore
from roster.models import Event

logger = logging.getLogger(__name__)

PROCESSED = "processed"
SKIPPED = "skipped"
INVALID = "invalid"
FAILED = "failed"


class GenerationState:
    """Track the outcome of the most recent generation run."""

    _last_run: datetime | None = None
    _last_stats: dict | None = None
    _last_error: str | None = None

    @classmethod
    def record_run(cls, stats: dict) -> None:
        cls._last_run = datetime.now(UTC)
        cls._last_stats = stats
        cls._last_error = None

    @classmethod
    def record_failure(cls, error: str) -> None:
        cls._last_run = datetime.now(UTC)
        cls._last_stats = None
        cls._last_error = error

    @classmethod
    def get_status(cls) -> dict:
        return {
            "last_run_time": cls._last_run,
            "success": cls._last_run is not None and cls._last_error is None,
            "stats": cls._last_stats,
            "error": cls._last_error,
        }

    @classmethod
    def reset(cls) -> None:
        cls._last_run = None
        cls._last_stats = None
        cls._last_error = None


@dataclass(frozen=True)
class DueEvent:
    """An event selected for generation, with its values read up front.

    Plain values are captured at selection time so that per-event error
    handling never has to touch an expired ORM instance.
    """
    event_id: str
    event_date: date
    spots: object
    description: str = ""


def local_today(timezone: str | None = None) -> date:
    """Current calendar date in the configured timezone."""
    return datetime.now(ZoneInfo(timezone or settings.timezone)).date()


def parse_event_date(value) -> date:
    """Parse an event's stored date, dropping any time of day.

    Raises:
        InvalidEventConfig: If the value is missing or not an ISO date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        raise InvalidEventConfig(f"event has no date (got {value!r})")
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00")).date()
    except ValueError as e:
        raise InvalidEventConfig(f"unparseable date {value!r}") from e


def lead_time_days(event: Event, default: int | None = None) -> int:
    """Days before the event at which its lists become due."""
    days = event.generate_list_days_before
    if days is None:
        return settings.default_generate_list_days_before if default is None else default
    if isinstance(days, bool) or not isinstance(days, int):
        raise InvalidEventConfig(f"generate_list_days_before must be an integer, got {days!r}")
    return days


def select_due_events(
    events: list[Event],
    today: date,
    default_days_before: int | None = None,
) -> tuple[list[DueEvent], list[tuple[str, str]]]:
    """
    Pick the events whose lists should be generated on ``today``.

    An event is due when its list has not been generated yet and it is at
    most ``generate_list_days_before`` calendar days away. Events in the past
    stay due: late generation beats silently skipping them.

    Returns:
        A ``(due, invalid)`` pair. ``invalid`` holds ``(event_id, reason)``
        for events whose date or lead time cannot be interpreted; they are
        left pending so they are retried once corrected.
    """
    due = []
    invalid = []
    for event in events:
        if event.list_generated:
            continue
        try:
            event_date = parse_event_date(event.date)
            days_before = lead_time_days(event, default_days_before)
        except InvalidEventConfig as e:
            invalid.append((event.id, str(e)))
            continue

        if (event_date - today).days > days_before:
            continue

        due.append(
            DueEvent(
                event_id=event.id,
                event_date=event_date,
                spots=event.spots,
                description=event.description or "",
            )
        )
    return due, invalid


def assemble_participants(store: RecordStore, event_id: str) -> list[Participant]:
    """
    Join an event's registrations with each registrant's profile.

    Returns an empty list when nobody registered. A registrant without a
    profile is treated as never having attended.
    """
    registrations = store.list_registrations(event_id)
    if not registrations:
        return []

    profiles = store.get_profiles(r.user_id for r in registrations)

    participants = []
    for registration in registrations:
        profile = profiles.get(registration.user_id)
        if profile is None:
            logger.warning(
                f"No profile for user {registration.user_id} registered to event "
                f"{event_id}, treating as never attended"
            )
        participants.append(
            Participant(
                user_id=registration.user_id,
                display_name=registration.display_name or "Unknown User",
                is_organizer=bool(registration.is_organizer),
                last_attended=profile.last_attended if profile else None,
                registered_at=registration.registered_at,
            )
        )
    return participants


def commit_partition(
    store: RecordStore,
    due: DueEvent,
    result: PartitionResult,
    now: datetime | None = None,
) -> bool:
    """
    Persist an event's lists and advance its attendees' profiles.

    Both writes happen in one store transaction. The event update only
    applies while ``list_generated`` is still false, so a concurrent run that
    got there first turns this call into a no-op.

    Returns:
        True if this call committed the lists, False if the event had
        already been generated.

    Raises:
        InvalidEventConfig: If the event's capacity is unusable.
    """
    validate_spots(due.spots)
    sorted_at = now or datetime.now(UTC)

    attendees = [
        {"uid": p.user_id, "displayName": p.display_name, "isOrganizer": p.is_organizer}
        for p in result.confirmed
    ]
    waiting_list = [
        {"uid": p.user_id, "displayName": p.display_name} for p in result.waiting
    ]

    with store.transaction():
        if not store.update_event(due.event_id, attendees, waiting_list, sorted_at):
            logger.info(f"Event {due.event_id} already generated by another run, skipping")
            return False

        for participant in result.confirmed:
            if store.update_profile(participant.user_id, due.event_date):
                continue
            if store.get_profile(participant.user_id) is None:
                logger.warning(
                    f"Confirmed user {participant.user_id} has no profile, "
                    f"last attendance not recorded for event {due.event_id}"
                )
            else:
                logger.debug(
                    f"User {participant.user_id} already attended on or after "
                    f"{due.event_date}, last attendance unchanged"
                )
    return True


def process_event(
    store: RecordStore,
    due: DueEvent,
    tie_break: str | None = None,
    now: datetime | None = None,
) -> str:
    """Generate lists for one due event. Returns the outcome bucket."""
    spots = validate_spots(due.spots)
    participants = assemble_participants(store, due.event_id)
    result = partition(
        participants,
        spots,
        tie_break=tie_break or settings.tie_break,
        seed=due.event_id,
    )

    if not commit_partition(store, due, result, now=now):
        return SKIPPED

    if not participants:
        logger.info(f"No registrations for event {due.event_id}, marked with empty lists")
        return SKIPPED

    logger.info(
        f"Generated lists for event {due.event_id} ({due.description}): "
        f"{len(result.confirmed)} confirmed, {len(result.waiting)} waiting"
    )
    return PROCESSED


def generate_lists(
    store: RecordStore,
    today: date | None = None,
    tie_break: str | None = None,
    default_days_before: int | None = None,
    now: datetime | None = None,
) -> dict:
    """
    Run list generation for every due event.

    Each event is handled on its own; a failure is logged and counted and the
    remaining events are still attempted. Failed and invalid events keep
    ``list_generated=False`` and are picked up by the next run.

    Returns dict with keys: processed, skipped, invalid, failed.
    """
    today = today or local_today()
    stats = {PROCESSED: 0, SKIPPED: 0, INVALID: 0, FAILED: 0}

    events = store.list_pending_events()
    if not events:
        logger.info("No events to sort")
        return stats

    due_events, invalid = select_due_events(events, today, default_days_before)
    for event_id, reason in invalid:
        logger.error(f"Skipping event {event_id}: {reason}")
        stats[INVALID] += 1

    for due in due_events:
        logger.info(f"Sorting event: {due.description} ({due.event_id})")
        try:
            outcome = process_event(store, due, tie_break=tie_break, now=now)
        except InvalidEventConfig as e:
            store.rollback()
            logger.error(f"Skipping event {due.event_id}: {e}")
            stats[INVALID] += 1
            continue
        except Exception:
            store.rollback()
            logger.exception(f"List generation failed for event {due.event_id}")
            stats[FAILED] += 1
            continue
        stats[outcome] += 1

    logger.info(f"List generation completed: {stats}")
    return stats


def preview_lists(
    store: RecordStore,
    today: date | None = None,
    tie_break: str | None = None,
    default_days_before: int | None = None,
) -> list[tuple[DueEvent, PartitionResult]]:
    """Rank every due event without writing anything."""
    today = today or local_today()
    due_events, invalid = select_due_events(
        store.list_pending_events(), today, default_days_before
    )
    for event_id, reason in invalid:
        logger.error(f"Skipping event {event_id}: {reason}")

    previews = []
    for due in due_events:
        try:
            participants = assemble_participants(store, due.event_id)
            result = partition(
                participants,
                due.spots,
                tie_break=tie_break or settings.tie_break,
                seed=due.event_id,
            )
        except InvalidEventConfig as e:
            logger.error(f"Skipping event {due.event_id}: {e}")
            continue
        previews.append((due, result))
    return previews
