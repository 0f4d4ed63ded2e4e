"""
Domain errors for the travelbook service.

Every error carries a user-facing (Hungarian) message and the HTTP status the
API layer answers with. Internal detail goes to the log, never to the client.
"""


class TravelbookError(Exception):
    """Base class for all domain errors"""
    status_code = 500
    default_message = "Hiba történt. Kérjük próbálja újra később."

    def __init__(self, message: str = None, detail: str = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class NotFoundError(TravelbookError):
    status_code = 404
    default_message = "A keresett elem nem található."


class ValidationError(TravelbookError):
    """Input rejected before any backend call is made"""
    status_code = 422
    default_message = "Érvénytelen adatok."


class BusinessRuleError(TravelbookError):
    status_code = 409
    default_message = "A művelet nem engedélyezett."


class BookingNotEditableError(BusinessRuleError):
    default_message = "Ez a foglalás már nem módosítható"


class CapacityError(BusinessRuleError):
    default_message = "Nincs elég szabad hely ehhez a foglaláshoz."


class LastTravelerError(BusinessRuleError):
    default_message = "Legalább egy utasnak kell lennie"


class InvalidTransitionError(BusinessRuleError):
    default_message = "A foglalás státusza nem módosítható erre az értékre."


class AuthenticationError(TravelbookError):
    status_code = 401
    default_message = "Hibás email cím vagy jelszó."


class PermissionDeniedError(TravelbookError):
    status_code = 403
    default_message = "Nincs jogosultsága ehhez a művelethez."


class DuplicateEmailError(TravelbookError):
    status_code = 409
    default_message = "Ez az email cím már regisztrálva van."


class BackendError(TravelbookError):
    """Generic failure of a store operation"""
    status_code = 502
    default_message = "A művelet nem sikerült. Kérjük próbálja újra később."


class AIGenerationError(TravelbookError):
    status_code = 502
    default_message = (
        "Hiba történt az útiterv generálása közben. Kérjük, próbáld újra később, "
        "vagy ellenőrizd az internetkapcsolatodat."
    )


class AIInvalidJSONError(AIGenerationError):
    """Model answered with text that is not JSON"""
    default_message = "Az AI nem érvényes JSON-t küldött."


class AIResponseShapeError(AIGenerationError):
    """Model answered with JSON that does not match the itinerary shape"""
    default_message = "Az AI válaszának szerkezete nem megfelelő."
