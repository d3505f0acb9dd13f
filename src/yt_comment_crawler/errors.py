class SortingError(RuntimeError):
    """The comment sort menu could not be resolved for the requested index."""


class ServerError(RuntimeError):
    """The InnerTube endpoint returned an explicit error message."""

    def __init__(self, message: str):
        super().__init__(f"Error returned from server: {message}")
        self.server_message = message
