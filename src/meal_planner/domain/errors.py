"""Domain errors surfaced to API callers."""


class PlannerError(Exception):
    """Base error with a user-facing message and HTTP status."""

    status_code = 400
    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRange(PlannerError):
    """Raised for bad weeks counts or calendar dates."""

    default_message = "Invalid date range"


class PlanLocked(PlannerError):
    """Raised when a premium plan is used without a premium subscription."""

    status_code = 403
    default_message = "This plan is premium. Upgrade your subscription to use it."


class InvalidMultiplier(PlannerError):
    """Raised when a serving multiplier is not a positive number."""

    default_message = "multiplier must be > 0"


class InvalidTemplate(PlannerError):
    """Raised when an admin template payload fails validation."""

    default_message = "Invalid plan template"


class RecipeNotFound(PlannerError):
    """Raised when a recipe id does not resolve in the catalog."""

    status_code = 404
    default_message = "Recipe not found"


class PlanNotFound(PlannerError):
    """Raised when a plan template id does not resolve."""

    status_code = 404
    default_message = "Plan not found"


class ItemNotFound(PlannerError):
    """Raised when a day item or list item is missing for an update."""

    status_code = 404
    default_message = "Item not found"


class ListNotFound(PlannerError):
    """Raised when a shopping list does not exist for the user."""

    status_code = 404
    default_message = "Shopping list not found"
