"""Rank participants and split them at an event's capacity.

Priority, highest first:
    1. Organizers before everyone else.
    2. Users who have never attended before users who have.
    3. Among previous attendees, the one absent longest (oldest
       ``last_attended``) first.

Participants equal under all three rules form a tie group. Tie groups are
ordered either deterministically (registration time, then user id) or by a
single seeded shuffle of each tie group. Shuffling is never done through a
random comparator, which would not be a valid ordering.
"""
import random
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from itertools import groupby

TIE_BREAK_REGISTERED_AT = "registered_at"
TIE_BREAK_SHUFFLE = "shuffle"
TIE_BREAKS = (TIE_BREAK_REGISTERED_AT, TIE_BREAK_SHUFFLE)


class InvalidEventConfig(ValueError):
    """Event data that cannot be ranked (bad date, bad capacity)."""


@dataclass(frozen=True)
class Participant:
    """One registered user, as seen by a single generation run.

    ``last_attended`` is a snapshot taken when the participant set was
    assembled; None means never attended.
    """
    user_id: str
    display_name: str
    is_organizer: bool = False
    last_attended: date | None = None
    registered_at: datetime | None = None


@dataclass
class PartitionResult:
    confirmed: list[Participant] = field(default_factory=list)
    waiting: list[Participant] = field(default_factory=list)

    @property
    def ranked(self) -> list[Participant]:
        return self.confirmed + self.waiting


def priority_key(participant: Participant) -> tuple:
    """Sort key for rules 1-3. Equal keys mean a tie."""
    return (
        not participant.is_organizer,
        participant.last_attended is not None,
        participant.last_attended or date.min,
    )


def _registered_key(participant: Participant) -> tuple:
    registered_at = participant.registered_at
    if registered_at is None:
        registered_at = datetime.max
    elif registered_at.tzinfo is not None:
        # SQLite hands back naive UTC; compare everything that way
        registered_at = registered_at.astimezone(UTC).replace(tzinfo=None)
    return (registered_at, participant.user_id)


def rank_participants(
    participants: list[Participant],
    tie_break: str = TIE_BREAK_REGISTERED_AT,
    seed: str | int | None = None,
) -> list[Participant]:
    """Return participants in priority order.

    Args:
        participants: Participants to rank. Not modified.
        tie_break: ``"registered_at"`` orders each tie group by registration
            time, then user id. ``"shuffle"`` shuffles each tie group with a
            single ``random.Random(seed)``; the same seed and input always
            give the same order.
        seed: Seed for the shuffle. Ignored for ``"registered_at"``.

    Raises:
        ValueError: If ``tie_break`` is not a known strategy.
    """
    if tie_break not in TIE_BREAKS:
        raise ValueError(f"Unknown tie_break {tie_break!r}, expected one of {TIE_BREAKS}")

    ordered = sorted(participants, key=lambda p: (priority_key(p), _registered_key(p)))
    if tie_break == TIE_BREAK_REGISTERED_AT:
        return ordered

    rng = random.Random(seed)
    ranked = []
    for _, group in groupby(ordered, key=priority_key):
        tied = list(group)
        rng.shuffle(tied)
        ranked.extend(tied)
    return ranked


def validate_spots(spots) -> int:
    """Return ``spots`` if it is a usable capacity, else raise.

    Negative or non-integer capacities are rejected, never clamped.
    """
    if isinstance(spots, bool) or not isinstance(spots, int):
        raise InvalidEventConfig(f"spots must be a non-negative integer, got {spots!r}")
    if spots < 0:
        raise InvalidEventConfig(f"spots must be a non-negative integer, got {spots}")
    return spots


def partition(
    participants: list[Participant],
    spots: int,
    tie_break: str = TIE_BREAK_REGISTERED_AT,
    seed: str | int | None = None,
) -> PartitionResult:
    """Rank participants and split them into confirmed and waiting lists.

    The first ``spots`` ranked participants are confirmed, the rest wait in
    rank order. With ``spots=0`` everyone waits.
    """
    spots = validate_spots(spots)
    ranked = rank_participants(participants, tie_break=tie_break, seed=seed)
    return PartitionResult(confirmed=ranked[:spots], waiting=ranked[spots:])
