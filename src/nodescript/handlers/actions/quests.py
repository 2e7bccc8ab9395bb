"""Quest progression.

Starting, completing and failing a quest each raise the matching Quest event
on the quest's own graphs, inline, before the walk continues. Completing the
last main quest also tells the host the adventure is over.
"""

from __future__ import annotations

import logging

from ...events.bus import HostEvent
from ...utils.coerce import parse_enum
from ...world.models import QuestStatus
from ..common import read_text
from . import action

logger = logging.getLogger(__name__)

QUEST_OWNER = "Quest"

_STATUS_MESSAGES = {
    QuestStatus.IN_PROGRESS: "[Nueva misión: {name}]",
    QuestStatus.COMPLETED: "[¡Misión completada: {name}!]",
    QuestStatus.FAILED: "[Misión fallida: {name}]",
}


def _announce(ctx, quest_id: str, status: QuestStatus) -> None:
    template = _STATUS_MESSAGES.get(status)
    if template is None:
        return
    definition = ctx.world.quest_definition(quest_id)
    name = definition.name if definition is not None else quest_id
    ctx.emit(HostEvent.MESSAGE, text=template.format(name=name))


def _check_adventure_completed(ctx) -> None:
    if ctx.world.all_main_quests_completed():
        logger.info("Every main quest is completed")
        ctx.emit(HostEvent.ADVENTURE_COMPLETED)


@action("Action_StartQuest", required=("QuestId",))
async def start_quest(node, ctx):
    quest_id = read_text(ctx, node, "QuestId")
    if not quest_id:
        return
    state = ctx.world.ensure_quest(quest_id)
    state.status = QuestStatus.IN_PROGRESS
    state.current_objective_index = 0
    _announce(ctx, quest_id, QuestStatus.IN_PROGRESS)
    await ctx.trigger(QUEST_OWNER, quest_id, "Event_OnQuestStart")


@action("Action_CompleteQuest", required=("QuestId",))
async def complete_quest(node, ctx):
    quest_id = read_text(ctx, node, "QuestId")
    state = ctx.world.quest(quest_id)
    if state is None:
        return
    state.status = QuestStatus.COMPLETED
    _announce(ctx, quest_id, QuestStatus.COMPLETED)
    await ctx.trigger(QUEST_OWNER, quest_id, "Event_OnQuestComplete")
    _check_adventure_completed(ctx)


@action("Action_FailQuest", required=("QuestId",))
async def fail_quest(node, ctx):
    quest_id = read_text(ctx, node, "QuestId")
    state = ctx.world.quest(quest_id)
    if state is None:
        return
    state.status = QuestStatus.FAILED
    _announce(ctx, quest_id, QuestStatus.FAILED)
    await ctx.trigger(QUEST_OWNER, quest_id, "Event_OnQuestFail")


@action("Action_SetQuestStatus", required=("QuestId",))
def set_quest_status(node, ctx):
    """Force a quest into a status without raising quest events."""
    quest_id = read_text(ctx, node, "QuestId")
    if not quest_id:
        return
    raw = read_text(ctx, node, "Status", "InProgress")
    status = parse_enum(QuestStatus, raw)
    if status is None:
        logger.debug("Unknown quest status %r for %s; ignored", raw, quest_id)
        return
    ctx.world.ensure_quest(quest_id).status = status
    _announce(ctx, quest_id, status)
    if status is QuestStatus.COMPLETED:
        _check_adventure_completed(ctx)


@action("Action_AdvanceObjective", required=("QuestId",))
def advance_objective(node, ctx):
    quest_id = read_text(ctx, node, "QuestId")
    state = ctx.world.quest(quest_id)
    definition = ctx.world.quest_definition(quest_id)
    if state is None or definition is None:
        return
    if state.current_objective_index < len(definition.objectives) - 1:
        state.current_objective_index += 1
        objective = definition.objectives[state.current_objective_index]
        ctx.emit(HostEvent.MESSAGE, text=f"[Nuevo objetivo: {objective}]")
