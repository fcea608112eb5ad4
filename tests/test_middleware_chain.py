import asyncio
import pytest
from statekit import Store, compose
from counter_domain import Counter, Increment, Decrement, SetError, reduce_counter


def recorder(name, log):
    async def _mw(get_state, dispatch, next, action):
        log.append(f"{name}-pre")
        await next(action)
        log.append(f"{name}-post")
    return _mw


@pytest.mark.asyncio
async def test_onion_order():
    log = []

    def reducer(state, action):
        log.append("reducer")
        return state

    store = Store(Counter(), reducer, [recorder("m0", log), recorder("m1", log)])
    await store.dispatch(Increment())
    assert log == ["m0-pre", "m1-pre", "reducer", "m1-post", "m0-post"]


@pytest.mark.asyncio
async def test_reordering_non_commutative_middleware_is_observable():
    async def double(get_state, dispatch, next, action):
        await next(action)
        await next(action)

    async def to_decrement(get_state, dispatch, next, action):
        await next(Decrement() if isinstance(action, Increment) else action)

    async def only_first(get_state, dispatch, next, action):
        # forwards a single Increment no matter what comes in
        await next(Increment())

    a = Store(Counter(), reduce_counter, [double, only_first])
    b = Store(Counter(), reduce_counter, [only_first, to_decrement])
    c = Store(Counter(), reduce_counter, [to_decrement, only_first])
    await a.dispatch(Increment())
    await b.dispatch(Increment())
    await c.dispatch(Increment())
    assert a.state.counter == 2
    assert b.state.counter == -1
    assert c.state.counter == 1


@pytest.mark.asyncio
async def test_transform_middleware_maps_increment_to_decrement():
    seen = []

    async def transform(get_state, dispatch, next, action):
        await next(Decrement() if isinstance(action, Increment) else action)

    def reducer(state, action):
        seen.append(action)
        return reduce_counter(state, action)

    store = Store(Counter(), reducer, [transform])
    await store.dispatch(Increment())
    assert store.state.counter == -1
    assert seen == [Decrement()]


@pytest.mark.asyncio
async def test_filtering_middleware_blocks_reducer():
    reducer_calls = []

    async def block_increment(get_state, dispatch, next, action):
        if isinstance(action, Increment):
            return
        await next(action)

    def reducer(state, action):
        reducer_calls.append(action)
        return reduce_counter(state, action)

    store = Store(Counter(), reducer, [block_increment])
    await store.dispatch(Increment())
    assert reducer_calls == []
    assert store.state.counter == 0

    await store.dispatch(Decrement())
    assert reducer_calls == [Decrement()]


@pytest.mark.asyncio
async def test_outer_post_code_runs_when_inner_drops():
    log = []

    async def drop(get_state, dispatch, next, action):
        log.append("drop")

    store = Store(Counter(), reduce_counter, [recorder("outer", log), drop, recorder("inner", log)])
    await store.dispatch(Increment())
    assert log == ["outer-pre", "drop", "outer-post"]
    assert store.state.counter == 0


@pytest.mark.asyncio
async def test_state_accessor_sees_live_state():
    observed = []

    async def cap_at_two(get_state, dispatch, next, action):
        if isinstance(action, Increment) and get_state().counter >= 2:
            return
        await next(action)

    async def watch(get_state, dispatch, next, action):
        observed.append(get_state().counter)
        await next(action)
        observed.append(get_state().counter)

    store = Store(Counter(), reduce_counter, [watch, cap_at_two])
    for _ in range(3):
        await store.dispatch(Increment())
    assert store.state.counter == 2
    assert observed == [0, 1, 1, 2, 2, 2]


@pytest.mark.asyncio
async def test_async_middleware_settles_before_dispatch_returns():
    done = []

    async def slow(get_state, dispatch, next, action):
        await asyncio.sleep(0.01)
        done.append(True)
        await next(action)

    store = Store(Counter(), reduce_counter, [slow])
    await store.dispatch(Increment())
    assert done == [True]
    assert store.state.counter == 1


@pytest.mark.asyncio
async def test_calling_next_twice_applies_twice():
    async def twice(get_state, dispatch, next, action):
        await next(action)
        await next(action)

    store = Store(Counter(), reduce_counter, [twice])
    await store.dispatch(Increment())
    assert store.state.counter == 2
    await store.undo()
    assert store.state.counter == 0


@pytest.mark.asyncio
async def test_logging_actions_in_order():
    logged = []

    async def log_actions(get_state, dispatch, next, action):
        logged.append(action)
        await next(action)

    store = Store(Counter(), lambda s, a: s, [log_actions])
    await store.dispatch(Increment())
    await store.dispatch(Decrement())
    await store.dispatch(Increment())
    assert logged == [Increment(), Decrement(), Increment()]


@pytest.mark.asyncio
async def test_reentrant_dispatch_is_an_independent_top_level_dispatch():
    visits = []

    async def flag_after_increment(get_state, dispatch, next, action):
        visits.append(action)
        await next(action)
        if isinstance(action, Increment):
            await dispatch(SetError("bumped"))

    store = Store(Counter(), reduce_counter, [flag_after_increment])
    await store.dispatch(Increment())

    # the re-entrant dispatch ran the full chain again
    assert visits == [Increment(), SetError("bumped")]
    assert store.state == Counter(counter=1, error="bumped")

    # and pushed its own history entry
    await store.undo()
    assert store.state == Counter(counter=1)
    await store.undo()
    assert store.state == Counter()


@pytest.mark.asyncio
async def test_compose_without_middleware_calls_terminal():
    committed = []
    chain = compose([], lambda: None, None, committed.append)
    await chain("go")
    assert committed == ["go"]


# ----- single-flight -----

def _tagged(log):
    async def _mw(get_state, dispatch, next, action):
        log.append(("pre", action))
        await asyncio.sleep(0.01)
        await next(action)
        log.append(("post", action))
    return _mw


@pytest.mark.asyncio
async def test_overlapping_dispatches_interleave_by_default():
    log = []
    store = Store(Counter(), reduce_counter, [_tagged(log)])
    await asyncio.gather(store.dispatch(Increment()), store.dispatch(Decrement()))
    assert [step for step, _ in log] == ["pre", "pre", "post", "post"]


@pytest.mark.asyncio
async def test_single_flight_serializes_dispatches():
    log = []
    store = Store(Counter(), reduce_counter, [_tagged(log)], single_flight=True)
    await asyncio.gather(store.dispatch(Increment()), store.dispatch(Decrement()))
    assert log == [
        ("pre", Increment()), ("post", Increment()),
        ("pre", Decrement()), ("post", Decrement()),
    ]
    assert store.state.counter == 0


@pytest.mark.asyncio
async def test_single_flight_allows_reentrant_dispatch():
    async def follow_up(get_state, dispatch, next, action):
        await next(action)
        if isinstance(action, Increment):
            await dispatch(SetError("done"))

    store = Store(Counter(), reduce_counter, [follow_up], single_flight=True)
    await asyncio.wait_for(store.dispatch(Increment()), timeout=1)
    assert store.state == Counter(counter=1, error="done")


@pytest.mark.asyncio
async def test_single_flight_does_not_queue_detached_reentrant_dispatch():
    log, detached = [], []

    async def spawn_follow_up(get_state, dispatch, next, action):
        await next(action)
        if isinstance(action, Increment):
            detached.append(asyncio.create_task(dispatch(SetError("late"))))

    store = Store(Counter(), reduce_counter, [spawn_follow_up, _tagged(log)], single_flight=True)
    await asyncio.gather(store.dispatch(Increment()), store.dispatch(Decrement()))
    await asyncio.gather(*detached)

    # the detached dispatch overlaps the queued Decrement instead of waiting for it
    assert log.index(("pre", Decrement())) < log.index(("post", SetError("late")))
    assert log.index(("pre", SetError("late"))) < log.index(("post", Decrement()))
    assert store.state == Counter(counter=0, error="late")
