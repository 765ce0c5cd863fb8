from pydantic import BaseModel

DEFAULT_KEY_SIZE = 4096
DEFAULT_IDENTITY = "localhost"


class SubjectConfig(BaseModel):
    """Fixed part of the CSR subject, the common name is supplied per request"""

    country: str = "AU"
    state: str = "Some-State"
    city: str = "Springfield"
    organization: str = "Example"
    email: str = "help@example.com"


class CsrRequestModel(BaseModel):
    identity: str = DEFAULT_IDENTITY
    key_size: int = DEFAULT_KEY_SIZE


class KeyAndCsrModel(BaseModel):
    private_key: str
    csr: str
