"""Domain exceptions raised by the service-area store and services."""


class ServiceAreaNotFoundError(LookupError):
    """Raised when an area id does not exist in the store."""

    def __init__(self, area_id: str):
        super().__init__(f"Service area '{area_id}' not found")
        self.area_id = area_id


class ServiceAreaConflictError(ValueError):
    """Raised when an area with the same name is already stored."""

    def __init__(self, name: str):
        super().__init__(f"Service area '{name}' already exists")
        self.name = name
