from roastify_options import Mood, RoastOptions
from roastify_state import AppState, RoastifyStore


def test_update_notifies_with_old_and_new():
    store = RoastifyStore()
    seen = []
    store.subscribe(lambda old, new: seen.append((old.is_generating, new.is_generating)))

    store.update(is_generating=True)

    assert seen == [(False, True)]
    assert store.state.is_generating is True


def test_no_notification_when_nothing_changes():
    store = RoastifyStore()
    seen = []
    store.subscribe(lambda old, new: seen.append(new))

    store.update(is_generating=False, roasts=())

    assert seen == []


def test_unsubscribe():
    store = RoastifyStore()
    seen = []
    unsubscribe = store.subscribe(lambda old, new: seen.append(new))

    unsubscribe()
    unsubscribe()
    store.update(input_text="hello")

    assert seen == []


def test_initial_state_keeps_options():
    options = RoastOptions(mood=Mood.SARCASTIC)
    store = RoastifyStore(AppState(options=options))
    assert store.state.options.mood is Mood.SARCASTIC
    assert store.state.roasts == ()
