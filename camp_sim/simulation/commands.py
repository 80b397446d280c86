"""Player commands: select a meeple, give it an action, point it at a resource.

Commands run synchronously between frames and mutate the engine's state
directly. They never raise: every refusal is a rejected ``CommandResult``
plus exactly one line in the camp log, and leaves the state untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Union

from camp_sim.agents.meeple import Action, ActionTarget, Meeple, Status
from camp_sim.core.config import CAMP_CENTER
from camp_sim.viz.logger import SimLogger
from camp_sim.world.resources import ResourceType
from camp_sim.world.spatial import as_position, is_finite_position


ACTIONS: tuple[str, ...] = ("EAT", "SLEEP", "HEAL", "RITUAL", "LIGHT_FIRE", "GATHER")

# Busy state entered by each timed action
_TIMED_ACTION_STATES: dict[str, Action] = {
    "EAT": Action.EATING,
    "SLEEP": Action.SLEEPING,
    "HEAL": Action.HEALING,
    "RITUAL": Action.RITUAL,
}


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a player command."""

    accepted: bool
    message: str = ""


class CommandController:
    """Selection state and the command API used by the UI layer."""

    def __init__(self, engine: "SimulationEngine") -> None:  # noqa: F821
        self._engine = engine
        self.selected_id: Optional[int] = None
        self.pending_gather: bool = False

    @property
    def selected(self) -> Optional[Meeple]:
        if self.selected_id is None:
            return None
        return self._engine.meeples.get(self.selected_id)

    # ------------------------------------------------------------------
    # Command API
    # ------------------------------------------------------------------

    def select_unit(self, meeple_id: int) -> CommandResult:
        """Select a meeple. Selecting the current selection clears it."""
        if self.selected_id == meeple_id:
            self.selected_id = None
            self.pending_gather = False
            return CommandResult(True, "Deselected.")

        meeple = self._engine.meeples.get(meeple_id)
        if meeple is None:
            return self._reject("No such unit.")
        if meeple.action is not Action.IDLE and not meeple.is_stunned:
            return self._reject(f"Wait! {meeple.name} is busy.", meeple)

        self.selected_id = meeple_id
        self.pending_gather = False
        return CommandResult(True, f"{meeple.name} selected.")

    def issue_action(self, action_name: str) -> CommandResult:
        """Give the selected meeple one of ``ACTIONS``."""
        name = str(action_name).upper()
        if name not in ACTIONS:
            return self._reject("Unknown action.")

        meeple = self.selected
        if meeple is None:
            return self._reject("No unit selected.")
        if meeple.is_stunned:
            return self._reject("Unit is stunned!", meeple)
        if not meeple.is_alive or meeple.action is not Action.IDLE:
            return self._reject(f"Wait! {meeple.name} is busy.", meeple)

        if name == "EAT":
            return self._eat(meeple)
        if name == "SLEEP":
            return self._sleep(meeple)
        if name == "HEAL":
            return self._heal(meeple)
        if name == "RITUAL":
            return self._ritual(meeple)
        if name == "LIGHT_FIRE":
            return self._light_fire(meeple)
        return self._arm_gather(meeple)

    def issue_gather_target(
        self,
        node_id: int,
        resource_type: Union[ResourceType, str],
        position: Optional[Sequence[float]],
    ) -> CommandResult:
        """Send the selected meeple to harvest *resource_type* at a node.

        Only valid while a GATHER command is pending.
        """
        if not is_finite_position(position):
            return self._reject("Invalid target.")
        try:
            resource = ResourceType(resource_type)
        except ValueError:
            return self._reject("Invalid target.")

        meeple = self.selected
        if meeple is None or not self.pending_gather:
            return self._reject("Choose Gather first.")
        if meeple.is_stunned:
            return self._reject("Unit is stunned!", meeple)
        if meeple.action is not Action.IDLE:
            return self._reject(f"Wait! {meeple.name} is busy.", meeple)

        node = self._engine.resource_manager.get_node(node_id)
        if node is None or not node.has(resource):
            return self._reject("Nothing to gather there.", meeple)

        meeple.order_move(as_position(position), ActionTarget.node(node_id), resource)
        self.pending_gather = False
        return CommandResult(True, f"{meeple.name} heads out for {resource.value}.")

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _eat(self, meeple: Meeple) -> CommandResult:
        cost = self._engine.tuning.action_costs["EAT"]
        if not self._engine.stockpile.spend(ResourceType.FOOD, cost):
            return self._reject("Not enough food.", meeple)
        meeple.status = Status.FIT
        return self._start_timed(meeple, "EAT", "Ate food.")

    def _sleep(self, meeple: Meeple) -> CommandResult:
        fire_lit = self._engine.clock.fire_lit
        if meeple.status is Status.TIRED:
            meeple.status = Status.FIT if fire_lit else Status.NORMAL
        elif meeple.status is Status.NORMAL and fire_lit:
            meeple.status = Status.FIT
        return self._start_timed(meeple, "SLEEP", "Sleeping...")

    def _heal(self, meeple: Meeple) -> CommandResult:
        cost = self._engine.tuning.action_costs["HEAL"]
        if not self._engine.stockpile.spend(ResourceType.PLANTS, cost):
            return self._reject("Need herbs.", meeple)
        meeple.status = Status.NORMAL
        return self._start_timed(meeple, "HEAL", "Healed.")

    def _ritual(self, meeple: Meeple) -> CommandResult:
        meeple.status = Status.NORMAL
        return self._start_timed(meeple, "RITUAL", "Ritual started.")

    def _light_fire(self, meeple: Meeple) -> CommandResult:
        cost = self._engine.tuning.action_costs["LIGHT_FIRE"]
        if not self._engine.stockpile.spend(ResourceType.WOOD, cost):
            return self._reject(f"Need {cost} wood.", meeple)
        meeple.order_move(CAMP_CENTER, ActionTarget.fire())
        self._log(SimLogger.FIRE, "Moving to fire...", meeple)
        return CommandResult(True, "Moving to fire...")

    def _arm_gather(self, meeple: Meeple) -> CommandResult:
        if meeple.status is Status.TIRED:
            return self._reject("Too tired.", meeple)
        self.pending_gather = True
        self._log(SimLogger.COMMAND, "Select resource.", meeple)
        return CommandResult(True, "Select resource.")

    def _start_timed(self, meeple: Meeple, name: str, message: str) -> CommandResult:
        busy_state = _TIMED_ACTION_STATES[name]
        meeple.action = busy_state
        meeple.action_serial += 1
        serial = meeple.action_serial

        def finish() -> None:
            # Stale if a hit sent the meeple home or a newer action started.
            if meeple.action is busy_state and meeple.action_serial == serial:
                meeple.action = Action.IDLE

        self._engine.timers.schedule(
            self._engine.session_time,
            self._engine.tuning.action_durations[name],
            finish,
            label=f"{name}:{meeple.id}",
        )
        self._log(SimLogger.ACTION, message, meeple)
        return CommandResult(True, message)

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    def _reject(self, message: str, meeple: Optional[Meeple] = None) -> CommandResult:
        self._engine.metrics.record_rejection()
        self._log(SimLogger.COMMAND, message, meeple, rejected=True)
        return CommandResult(False, message)

    def _log(self, category: str, message: str, meeple: Optional[Meeple] = None, **data) -> None:
        self._engine.logger.log(
            category,
            message,
            [meeple.id] if meeple is not None else None,
            time=self._engine.session_time,
            day=self._engine.clock.day,
            **data,
        )
