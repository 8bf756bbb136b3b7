"""Custom exception classes"""


class BaseAppError(Exception):
    """Base class for application errors"""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class GeminiServiceUnavailableError(BaseAppError):
    """Gemini API is temporarily overloaded (503)"""

    def __init__(self, message: str = "Gemini API is temporarily overloaded. Please try again shortly."):
        super().__init__(message, status_code=503)


class GeminiAPIKeyError(BaseAppError):
    """Gemini API key problem (403)"""

    def __init__(self, message: str = "Question generation failed because of a Gemini API key problem. Contact the administrator."):
        super().__init__(message, status_code=403)


class SourceUnavailableError(BaseAppError):
    """Remote question generation failed or returned unparseable data (503)"""

    def __init__(self, message: str = "Failed to generate the test. Please try again."):
        super().__init__(message, status_code=503)


class InvalidTransitionError(BaseAppError):
    """Operation is not allowed in the current session phase (409)"""

    def __init__(self, operation: str, phase: str):
        self.operation = operation
        self.phase = phase
        super().__init__(f"'{operation}' is not allowed while the session is {phase}", status_code=409)


class IndexOutOfRangeError(BaseAppError):
    """Question index outside the loaded question list (400)"""

    def __init__(self, index: int, total: int):
        self.index = index
        self.total = total
        super().__init__(f"Question index {index} is out of range (questions: {total})", status_code=400)


class InvalidOptionError(BaseAppError):
    """Selected option is not one of the current question's options (400)"""

    def __init__(self, option: str):
        super().__init__(f"Option is not valid for the current question: {option}", status_code=400)


class ConfigurationInvalidError(BaseAppError):
    """Test configuration violates its invariants (422)"""

    def __init__(self, message: str):
        super().__init__(message, status_code=422)


class TestSessionNotFoundError(BaseAppError):
    """Test session does not exist or was discarded (404)"""

    __test__ = False

    def __init__(self, session_id: str):
        super().__init__(f"Test session not found: {session_id}", status_code=404)


class QuestionDecodeError(SourceUnavailableError):
    """Generation response does not match the question schema (503)"""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Generated questions could not be decoded: {detail}")
