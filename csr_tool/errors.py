class CsrToolError(Exception):
    """
    Base error for the csr tool, tagged with the step that failed
    the library exception underneath is chained on __cause__
    """

    step: str = "csr tool"

    def __init__(self, message: str, step: str | None = None):
        super().__init__(message)
        self.message = message
        if step is not None:
            self.step = step

    def __str__(self):
        return f"{self.step}: {self.message}"


class KeyGenerationError(CsrToolError):
    step = "key generation"


class NameConstructionError(CsrToolError):
    step = "subject name"


class ExtensionConstructionError(CsrToolError):
    step = "extensions"


class SigningError(CsrToolError):
    step = "signing"


class SerializationError(CsrToolError):
    step = "serialization"


class OutputEncodingError(CsrToolError):
    step = "output encoding"
