class PuzzleError(Exception):
    pass

class ConfigurationError(PuzzleError):
    pass

class SessionStateError(PuzzleError):
    def __init__(self, action, state):
        self.action = action
        self.state = state
        super().__init__(f"Cannot {action} while {state}.")
