from enum import Enum

from solprobe.state import ApplicationState

# Upper bound on how long the control loop waits for a key before checking the scheduler
POLL_TIMEOUT_SECONDS = 0.1


class Action(Enum):
    QUIT = "quit"
    TAB_LEFT = "tab_left"
    TAB_RIGHT = "tab_right"
    REFRESH = "refresh"
    NONE = "none"


DEFAULT_KEYMAP = {
    "q": Action.QUIT,
    "left": Action.TAB_LEFT,
    "right": Action.TAB_RIGHT,
    "r": Action.REFRESH,
}


class InputRouter:
    """Turns one key at a time into one state transition.

    Tab moves are applied to the state here; quit and refresh are returned
    for the control loop to carry out.
    """

    def __init__(self, state: ApplicationState, keymap: dict[str, Action] | None = None) -> None:
        self.state = state
        self.keymap = dict(DEFAULT_KEYMAP if keymap is None else keymap)

    def route(self, key: str) -> Action:
        action = self.keymap.get(key, Action.NONE)
        if action is Action.TAB_LEFT:
            self.state.select_previous()
        elif action is Action.TAB_RIGHT:
            self.state.select_next()
        return action
