import pytest

from nodescript.events.bus import EventBus, HostEvent


def test_subscribe_emit_and_unsubscribe():
    bus = EventBus()
    seen = []

    def on_message(text):
        seen.append(text)
        return len(text)

    bus.subscribe(HostEvent.MESSAGE, on_message)
    bus.subscribe(HostEvent.MESSAGE, on_message)
    assert bus.emit(HostEvent.MESSAGE, text="hola") == [4]
    bus.unsubscribe(HostEvent.MESSAGE, on_message)
    assert not bus.has_subscribers(HostEvent.MESSAGE)
    assert bus.emit(HostEvent.MESSAGE, text="again") == []
    assert seen == ["hola"]


def test_failing_subscriber_does_not_stop_the_others(caplog):
    bus = EventBus()
    seen = []

    def broken(sound_id):
        raise RuntimeError("speaker missing")

    bus.subscribe(HostEvent.PLAY_SOUND, broken)
    bus.subscribe(HostEvent.PLAY_SOUND, lambda sound_id: seen.append(sound_id))
    bus.emit(HostEvent.PLAY_SOUND, sound_id="thunder")
    assert seen == ["thunder"]
    assert any("speaker missing" in rec.message for rec in caplog.records)


def test_failing_host_callback_does_not_fail_the_walk(world, build, make_engine, fire):
    engine, rec = make_engine(
        world,
        [
            build.chain(
                build.node("start", "Event_OnEnter"),
                build.node("sound", "Action_PlaySound", SoundId="creak"),
                build.node("msg", "Action_ShowMessage", Message="done"),
            )
        ],
    )

    def broken(sound_id):
        raise OSError("no audio device")

    engine.bus.subscribe(HostEvent.PLAY_SOUND, broken)
    assert fire(engine, "Room", "hall", "Event_OnEnter").success
    assert rec.messages == ["done"]
    assert rec.of(HostEvent.DIAGNOSTIC) == [{"text": "[Host error] play_sound: OSError: no audio device"}]


def test_clear_removes_everything():
    bus = EventBus()
    bus.subscribe(HostEvent.START_COMBAT, lambda npc_id: None)
    bus.clear()
    assert not bus.has_subscribers(HostEvent.START_COMBAT)


def test_broken_diagnostic_subscriber_is_only_logged(caplog):
    bus = EventBus()
    reports = []

    def broken(**payload):
        raise RuntimeError("log sink closed")

    bus.subscribe(HostEvent.DIAGNOSTIC, broken)
    bus.subscribe(HostEvent.DIAGNOSTIC, lambda text: reports.append(text))
    bus.subscribe(HostEvent.START_TRADE, broken)
    bus.emit(HostEvent.START_TRADE, npc_id="merchant")
    assert reports == ["[Host error] start_trade: RuntimeError: log sink closed"]
    assert [r.levelname for r in caplog.records if "log sink closed" in r.getMessage()] == ["ERROR", "ERROR"]


def test_unknown_channels_are_rejected():
    with pytest.raises(ValueError):
        EventBus().subscribe("mesage", print)
