from .exceptions import InvalidTransitionError


class StateMachine:
    """
    Closed set of states plus the transitions allowed between them.

    Tables are plain dicts keyed by state:
        {"draft": ("posted",), "posted": ("reversed",), "reversed": ()}
    A state missing from the table has no way out.
    """

    def __init__(self, name, transitions):
        self.name = name
        self.transitions = {
            str(state): frozenset(str(t) for t in targets)
            for state, targets in transitions.items()
        }

    @property
    def states(self):
        found = set(self.transitions)
        for targets in self.transitions.values():
            found |= targets
        return frozenset(found)

    def can_transition(self, current, target) -> bool:
        return str(target) in self.transitions.get(str(current), frozenset())

    def assert_transition(self, current, target):
        if not self.can_transition(current, target):
            raise InvalidTransitionError(
                f"Cannot change {self.name} status from {current} to {target}"
            )

    def is_terminal(self, state) -> bool:
        return not self.transitions.get(str(state))
