"""Error taxonomy shared by the core, the registry and the store."""


class ActionCenterError(Exception):
    """Base class for all Action Center errors."""

    pass


class ValidationError(ActionCenterError):
    """Raised when a caller supplies a missing, empty or malformed value."""

    pass


class NotFoundError(ActionCenterError):
    """Raised when an operation targets an id that does not exist."""

    def __init__(self, kind: str, item_id: str):
        super().__init__(f"{kind} not found: {item_id}")
        self.kind = kind
        self.item_id = item_id


class ConflictError(ActionCenterError):
    """Raised when a project name is already taken."""

    def __init__(self, name: str):
        super().__init__(f'Project "{name}" already exists')
        self.name = name


class StorageError(ActionCenterError):
    """Raised when the underlying store fails. Opaque to callers."""

    pass
