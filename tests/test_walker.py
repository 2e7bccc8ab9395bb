from nodescript.events.bus import HostEvent


def test_linear_walk_runs_every_node_in_order(world, build, make_engine, fire):
    graph = build.chain(
        build.node("start", "Event_OnEnter"),
        build.node("m1", "Action_ShowMessage", Message="one"),
        build.node("m2", "Action_ShowMessage", Message="two"),
    )
    engine, rec = make_engine(world, [graph])
    report = fire(engine, "Room", "hall", "Event_OnEnter")
    assert report.success
    assert report.walks == 1
    assert rec.messages == ["one", "two"]


def test_walk_stops_at_unwired_port(world, build, make_engine, fire):
    # the condition is False and only its True port is wired
    graph = build.graph(
        [
            build.node("start", "Event_OnEnter"),
            build.node("cond", "Condition_HasFlag", FlagName="never"),
            build.node("msg", "Action_ShowMessage", Message="unreachable"),
        ],
        [build.wire("start", "Exec", "cond"), build.wire("cond", "True", "msg")],
    )
    engine, rec = make_engine(world, [graph])
    assert fire(engine, "Room", "hall", "Event_OnEnter").success
    assert rec.messages == []


def test_walk_stops_silently_at_unknown_node_type(world, build, make_engine, fire):
    graph = build.chain(
        build.node("start", "Event_OnEnter"),
        build.node("talk", "Dialogue_Line", Text="hello"),
        build.node("msg", "Action_ShowMessage", Message="after"),
    )
    engine, rec = make_engine(world, [graph])
    report = fire(engine, "Room", "hall", "Event_OnEnter")
    assert report.success
    assert rec.messages == []


def test_connection_to_missing_node_ends_walk(world, build, make_engine, fire):
    graph = build.graph(
        [build.node("start", "Event_OnEnter")],
        [build.wire("start", "Exec", "ghost")],
    )
    engine, _ = make_engine(world, [graph])
    assert fire(engine, "Room", "hall", "Event_OnEnter").success


def test_cycle_is_aborted_by_step_guard(world, build, make_engine, fire, caplog):
    graph = build.graph(
        [
            build.node("start", "Event_OnEnter"),
            build.node("inc", "Action_IncrementCounter", CounterName="loops"),
        ],
        [build.wire("start", "Exec", "inc"), build.wire("inc", "Exec", "inc")],
    )
    engine, rec = make_engine(world, [graph], max_walk_steps=50)
    report = fire(engine, "Room", "hall", "Event_OnEnter")
    assert not report.success
    assert report.aborted
    # the entry node counts as one step
    assert world.get_counter("loops") == 49
    assert rec.of(HostEvent.DIAGNOSTIC)
    assert any("aborted" in r.message for r in caplog.records)


def test_world_changes_before_abort_are_kept(world, build, make_engine, fire):
    graph = build.graph(
        [
            build.node("start", "Event_OnEnter"),
            build.node("flag", "Action_SetFlag", FlagName="seen"),
            build.node("inc", "Action_IncrementCounter", CounterName="loops"),
        ],
        [build.wire("start", "Exec", "flag"), build.wire("flag", "Exec", "inc"), build.wire("inc", "Exec", "flag")],
    )
    engine, _ = make_engine(world, [graph], max_walk_steps=10)
    assert fire(engine, "Room", "hall", "Event_OnEnter").aborted
    assert world.get_flag("seen")
