"""
Review Session Manager.

Drives one learner's study session:

    idle --start_session--> active --end_session--> idle

Each ``review_card`` call runs the whole review pipeline synchronously:
1. Schedule the item (SM-2) and persist it
2. Pick a location (if not given), roll the base reward, apply modifiers
3. Add the final reward to the inventory (capped per stack)
4. Award XP for the recall quality
5. Record a ReviewStep and advance to the next card

The due queue is built once at session start, so the cursor walks a
fixed list no matter how items are rescheduled mid-session.

Draw order per review (RandomSource): location pick (only when no
location is passed), then the reward resolver, then the modifier
pipeline.
"""

from __future__ import annotations

import threading
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Protocol

from loguru import logger

from src.core.errors import AlreadyActiveError, NoActiveSessionError, NoCurrentCardError
from src.core.providers import Clock, RandomSource, SeededRandom, SystemClock
from src.island.catalog import get_resource
from src.island.companions import AUTO_GATHER_RESOURCE, AbilityKind, get_companion
from src.island.inventory import LearnerState
from src.island.loot import pick_location, resolve_base_reward
from src.island.models import Location, Rarity, RewardOutcome
from src.island.modifiers import apply_modifiers, tool_modifiers
from src.island.progression import LevelChange, XPEvent
from src.srs.due_queue import due_items
from src.srs.models import RecallQuality, ReviewableItem
from src.srs.scheduler import SM2Scheduler

DEFAULT_SESSION_LIMIT = 20


class PersistenceGateway(Protocol):
    """Storage the session manager reads from and writes to."""

    def load_items(self) -> list[ReviewableItem]: ...

    def save_item(self, item: ReviewableItem) -> None: ...

    def load_learner(self) -> LearnerState: ...

    def save_learner(self, learner: LearnerState) -> None: ...

    def save_session(self, session: ReviewSession) -> None: ...


# =============================================================================
# Session Records
# =============================================================================


@dataclass(frozen=True)
class ReviewStep:
    """Everything one review produced."""

    item_id: str
    quality: RecallQuality
    location: Location
    outcome: RewardOutcome
    bonus_log: tuple[str, ...]
    added: int  # Amount that actually fit in the inventory
    xp: int
    reviewed_at: datetime
    next_interval: int = 0
    auto_gathered: int = 0
    level_change: LevelChange | None = None
    unlocked_companions: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "item_id": self.item_id,
            "quality": self.quality.value,
            "location": self.location.value,
            "resource_id": self.outcome.resource_id,
            "quantity": self.outcome.quantity,
            "rarity": self.outcome.rarity.value if self.outcome.rarity else None,
            "bonus_log": list(self.bonus_log),
            "added": self.added,
            "xp": self.xp,
            "reviewed_at": self.reviewed_at.isoformat(),
            "next_interval": self.next_interval,
            "auto_gathered": self.auto_gathered,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReviewStep:
        rarity = data.get("rarity")
        return cls(
            item_id=data["item_id"],
            quality=RecallQuality(data["quality"]),
            location=Location(data["location"]),
            outcome=RewardOutcome(
                resource_id=data.get("resource_id"),
                quantity=data.get("quantity", 0),
                rarity=Rarity(rarity) if rarity else None,
            ),
            bonus_log=tuple(data.get("bonus_log", ())),
            added=data.get("added", 0),
            xp=data.get("xp", 0),
            reviewed_at=datetime.fromisoformat(data["reviewed_at"]),
            next_interval=data.get("next_interval", 0),
            auto_gathered=data.get("auto_gathered", 0),
        )


@dataclass
class ReviewSession:
    """A bounded run of reviews with aggregated XP and reward history."""

    id: str
    started_at: datetime
    completed_at: datetime | None = None
    cards_reviewed: int = 0
    xp_earned: int = 0
    reward_log: list[ReviewStep] = field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return self.completed_at is None

    @property
    def items_found(self) -> dict[str, int]:
        """Resource id -> quantity added to the inventory during the session."""
        found: dict[str, int] = {}
        for step in self.reward_log:
            if step.outcome.resource_id and step.added:
                found[step.outcome.resource_id] = found.get(step.outcome.resource_id, 0) + step.added
        return found


# =============================================================================
# Session Manager
# =============================================================================


class SessionManager:
    """
    Owns the active session for one learner.

    All public methods take the manager's lock, so a manager can be shared
    between threads; use one manager per learner.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        scheduler: SM2Scheduler | None = None,
        clock: Clock | None = None,
        rng: RandomSource | None = None,
        session_limit: int | None = DEFAULT_SESSION_LIMIT,
        default_companion: str | None = None,
        on_xp: Callable[[XPEvent], None] | None = None,
    ):
        """
        Initialize the session manager.

        Args:
            gateway: Persistence for items, learner state and sessions
            scheduler: SM-2 scheduler (default config if omitted)
            clock: Time source (UTC wall clock if omitted)
            rng: Random source for locations, loot and modifiers
            session_limit: Maximum cards per session (None for all due)
            default_companion: Companion to activate when none is active
            on_xp: Called with every XP event the session emits
        """
        self.gateway = gateway
        self.scheduler = scheduler or SM2Scheduler()
        self.clock = clock or SystemClock()
        self.rng = rng or SeededRandom()
        self.session_limit = session_limit
        self.default_companion = default_companion
        self.on_xp = on_xp

        self._lock = threading.Lock()
        self._session: ReviewSession | None = None
        self._learner: LearnerState | None = None
        self._queue: list[ReviewableItem] = []
        self._cursor = 0

    # =========================================================================
    # State
    # =========================================================================

    @property
    def is_active(self) -> bool:
        return self._session is not None

    @property
    def session(self) -> ReviewSession | None:
        return self._session

    @property
    def learner(self) -> LearnerState | None:
        """Learner state loaded for the active session."""
        return self._learner

    @property
    def remaining(self) -> int:
        """Cards left in the frozen queue."""
        return max(0, len(self._queue) - self._cursor)

    @property
    def queue_size(self) -> int:
        return len(self._queue)

    def current_card(self) -> ReviewableItem | None:
        """The card under the cursor, or None when idle or finished."""
        with self._lock:
            if self._session is None or self._cursor >= len(self._queue):
                return None
            return self._queue[self._cursor]

    # =========================================================================
    # Transitions
    # =========================================================================

    def start_session(self) -> ReviewSession:
        """
        Open a session over the items due now.

        Raises:
            AlreadyActiveError: If a session is already open
        """
        with self._lock:
            if self._session is not None:
                raise AlreadyActiveError(self._session.id)

            now = self.clock.now()
            self._learner = self.gateway.load_learner()
            self._queue = due_items(self.gateway.load_items(), now, limit=self.session_limit)
            self._cursor = 0

            if self._learner.active_companion is None and self.default_companion:
                if not self._learner.set_active_companion(self.default_companion):
                    logger.debug(f"Default companion {self.default_companion!r} not unlocked yet")

            self._session = ReviewSession(id=str(uuid.uuid4()), started_at=now)
            logger.info(f"Session {self._session.id} started with {len(self._queue)} due cards")
            return self._session

    def review_card(
        self,
        quality: RecallQuality,
        location: Location | None = None,
    ) -> ReviewStep:
        """
        Review the current card.

        Args:
            quality: Recall quality reported by the learner
            location: Where to gather; picked at random among unlocked
                locations when omitted

        Returns:
            The ReviewStep recorded for this review

        Raises:
            NoActiveSessionError: If no session is open
            NoCurrentCardError: If the queue is exhausted
        """
        with self._lock:
            session = self._session
            learner = self._learner
            if session is None or learner is None:
                raise NoActiveSessionError()
            if self._cursor >= len(self._queue):
                raise NoCurrentCardError(session.cards_reviewed)

            item = self._queue[self._cursor]
            now = self.clock.now()

            # 1. Scheduling
            result = self.scheduler.schedule(item, quality, now)
            updated = item.apply(result, now)
            self.gateway.save_item(updated)
            self._queue[self._cursor] = updated

            # 2. Reward
            if location is None:
                location = pick_location(learner.level, self.rng)
            base = resolve_base_reward(quality, location, self.rng)
            category = get_resource(base.resource_id).category if base.found else None
            modified = apply_modifiers(
                base,
                learner.companion_modifier,
                tool_modifiers(learner.crafted_items),
                location,
                category,
                self.rng,
            )
            outcome = modified.outcome
            bonus_log = list(modified.bonus_log)

            # 3. Inventory
            added = 0
            if outcome.found:
                added = learner.inventory.add(outcome.resource_id, outcome.quantity)
                if added < outcome.quantity:
                    logger.debug(
                        f"{outcome.resource_id}: stack full, kept {added} of {outcome.quantity}"
                    )
            auto_gathered = self._auto_gather(learner, session.cards_reviewed + 1, bonus_log)

            # 4. XP
            xp = quality.xp
            session.xp_earned += xp
            event = XPEvent(
                type="review",
                amount=xp,
                description=f"Reviewed item ({quality.value})",
                timestamp=now,
            )
            level_change = learner.progress.add_xp(event)
            unlocked: list[str] = []
            if level_change.leveled_up:
                unlocked = learner.unlock_companions(level_change.new_level)
                logger.info(f"Level up: {level_change.old_level} -> {level_change.new_level}")

            # 5. Record and advance
            step = ReviewStep(
                item_id=item.id,
                quality=quality,
                location=location,
                outcome=outcome,
                bonus_log=tuple(bonus_log),
                added=added,
                xp=xp,
                reviewed_at=now,
                next_interval=result.interval,
                auto_gathered=auto_gathered,
                level_change=level_change,
                unlocked_companions=tuple(unlocked),
            )
            session.reward_log.append(step)
            session.cards_reviewed += 1
            self._cursor += 1

        if self.on_xp is not None:
            self.on_xp(event)
        return step

    def end_session(self) -> ReviewSession:
        """
        Close the active session and persist it with the learner state.

        If a write fails the session stays open with its counters unapplied,
        so calling again is safe.

        Raises:
            NoActiveSessionError: If no session is open
        """
        with self._lock:
            session = self._session
            learner = self._learner
            if session is None or learner is None:
                raise NoActiveSessionError()

            now = self.clock.now()
            progress = replace(learner.progress)
            if session.cards_reviewed > 0:
                progress.update_streak(now.date())
                progress.total_items_reviewed += session.cards_reviewed

            # The open session is untouched until both writes succeed
            self.gateway.save_session(replace(session, completed_at=now))
            self.gateway.save_learner(replace(learner, progress=progress))

            session.completed_at = now
            learner.progress = progress

            self._session = None
            self._learner = None
            self._queue = []
            self._cursor = 0

            logger.info(
                f"Session {session.id} ended: {session.cards_reviewed} cards, "
                f"{session.xp_earned} XP"
            )
            return session

    # =========================================================================
    # Companion Helpers
    # =========================================================================

    def _auto_gather(self, learner: LearnerState, review_number: int, bonus_log: list[str]) -> int:
        """Gather for an auto-gathering companion every N reviews."""
        companion = get_companion(learner.active_companion)
        if companion is None or companion.ability != AbilityKind.AUTO_GATHER:
            return 0
        if review_number % int(companion.value) != 0:
            return 0

        gathered = learner.inventory.add(AUTO_GATHER_RESOURCE, 1)
        if gathered:
            bonus_log.append(f"{companion.emoji} {companion.name}: gathered 1 {AUTO_GATHER_RESOURCE}")
        return gathered
