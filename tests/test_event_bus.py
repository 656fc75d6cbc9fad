from src.session.events import EventBus, Topic


def test_publish_reaches_current_subscribers_only():
    bus = EventBus()
    first, second = [], []
    bus.subscribe(Topic.MODAL_VISIBILITY, first.append)

    bus.publish(Topic.MODAL_VISIBILITY, True)
    bus.subscribe(Topic.MODAL_VISIBILITY, second.append)
    bus.publish(Topic.MODAL_VISIBILITY, False)

    assert first == [True, False]
    assert second == [False]


def test_dispose_stops_delivery():
    bus = EventBus()
    seen = []
    sub = bus.subscribe(Topic.CART_CHANGED, seen.append)

    sub.dispose()
    sub.dispose()
    bus.publish(Topic.CART_CHANGED, "x")

    assert seen == []
    assert sub.active is False
    assert bus.listener_count(Topic.CART_CHANGED) == 0


def test_subscription_as_context_manager():
    bus = EventBus()
    seen = []

    with bus.subscribe(Topic.MODAL_VISIBILITY, seen.append):
        bus.publish(Topic.MODAL_VISIBILITY, True)
    bus.publish(Topic.MODAL_VISIBILITY, False)

    assert seen == [True]


def test_failing_listener_does_not_block_others():
    bus = EventBus()
    seen = []

    def broken(_payload):
        raise RuntimeError("boom")

    bus.subscribe(Topic.MODAL_VISIBILITY, broken)
    bus.subscribe(Topic.MODAL_VISIBILITY, seen.append)

    bus.publish(Topic.MODAL_VISIBILITY, True)

    assert seen == [True]


def test_topics_are_isolated_and_latest_is_tracked():
    bus = EventBus()
    modal = []
    bus.subscribe(Topic.MODAL_VISIBILITY, modal.append)

    bus.publish(Topic.CART_CHANGED, {"lines": []})

    assert modal == []
    assert bus.latest(Topic.CART_CHANGED) == {"lines": []}
    assert bus.latest(Topic.MODAL_VISIBILITY, default=False) is False
