from solprobe.input import Action, InputRouter
from solprobe.state import ApplicationState, Tab


def test_arrow_keys_move_between_tabs():
    state = ApplicationState()
    router = InputRouter(state)

    assert router.route("right") is Action.TAB_RIGHT
    assert state.selected_tab is Tab.NETWORK_PERFORMANCE
    assert router.route("left") is Action.TAB_LEFT
    assert state.selected_tab is Tab.NODE_HEALTH


def test_left_on_first_tab_stays_put():
    state = ApplicationState()

    InputRouter(state).route("left")

    assert state.selected_tab is Tab.NODE_HEALTH


def test_right_on_last_tab_stays_put():
    state = ApplicationState(selected_tab=Tab.MONITOR)

    InputRouter(state).route("right")

    assert state.selected_tab is Tab.MONITOR


def test_quit_and_refresh_are_returned_without_touching_tabs():
    state = ApplicationState(selected_tab=Tab.TROUBLESHOOT)
    router = InputRouter(state)

    assert router.route("q") is Action.QUIT
    assert router.route("r") is Action.REFRESH
    assert state.selected_tab is Tab.TROUBLESHOOT


def test_other_keys_are_ignored():
    state = ApplicationState(selected_tab=Tab.NETWORK_PERFORMANCE)
    router = InputRouter(state)

    for key in ("x", "up", "enter", "Q"):
        assert router.route(key) is Action.NONE
    assert state.selected_tab is Tab.NETWORK_PERFORMANCE


def test_custom_keymap():
    state = ApplicationState()
    router = InputRouter(state, {"l": Action.TAB_RIGHT})

    assert router.route("l") is Action.TAB_RIGHT
    assert router.route("right") is Action.NONE
    assert state.selected_tab is Tab.NETWORK_PERFORMANCE
