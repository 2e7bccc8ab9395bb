"""Event nodes: entry points of a walk. They do nothing themselves."""

from __future__ import annotations

from ..graph.model import NodeCategory
from ..runtime.registry import handler

EVENT_TAGS = (
    # game
    "Event_OnGameStart",
    "Event_OnGameEnd",
    "Event_EveryMinute",
    "Event_EveryHour",
    "Event_OnTurnStart",
    "Event_OnWeatherChange",
    # rooms
    "Event_OnEnter",
    "Event_OnExit",
    "Event_OnLook",
    # doors
    "Event_OnDoorOpen",
    "Event_OnDoorClose",
    "Event_OnDoorLock",
    "Event_OnDoorUnlock",
    # npcs
    "Event_OnTalk",
    "Event_OnNpcAttack",
    "Event_OnNpcDeath",
    "Event_OnNpcSee",
    # combat
    "Event_OnCombatStart",
    "Event_OnCombatVictory",
    "Event_OnCombatDefeat",
    "Event_OnCombatFlee",
    "Event_OnPlayerAttack",
    "Event_OnNpcTurn",
    "Event_OnPlayerDefend",
    "Event_OnCriticalHit",
    "Event_OnMiss",
    # trade
    "Event_OnTradeStart",
    "Event_OnTradeEnd",
    "Event_OnItemBought",
    "Event_OnItemSold",
    # objects
    "Event_OnTake",
    "Event_OnDrop",
    "Event_OnUse",
    "Event_OnExamine",
    "Event_OnRead",
    "Event_OnGive",
    "Event_OnContainerOpen",
    "Event_OnContainerClose",
    "Event_OnEat",
    "Event_OnDrink",
    "Event_OnEquip",
    "Event_OnUnequip",
    # quests
    "Event_OnQuestStart",
    "Event_OnQuestComplete",
    "Event_OnQuestFail",
    "Event_OnObjectiveComplete",
    # sleep
    "Event_OnSleep",
    "Event_OnWakeUp",
    "Event_OnWakeUpStartled",
    # player state
    "Event_OnPlayerDeath",
    "Event_OnHealthLow",
    "Event_OnHealthCritical",
    "Event_OnHungerHigh",
    "Event_OnThirstHigh",
    "Event_OnEnergyLow",
    "Event_OnSleepHigh",
    "Event_OnSanityLow",
    "Event_OnManaLow",
    "Event_OnStateThreshold",
    "Event_OnModifierApplied",
    "Event_OnModifierExpired",
    # money
    "Event_OnMoneyGained",
    "Event_OnMoneyLost",
    "Event_OnMoneyThreshold",
)


def entry_point(node, ctx):
    return None


for _tag in EVENT_TAGS:
    handler(_tag, NodeCategory.EVENT)(entry_point)

# The router seeds EntityId/OldValue/NewValue before walking from here
handler("Event_OnPropertyChanged", NodeCategory.EVENT, required=("EntityType", "PropertyName"))(entry_point)
