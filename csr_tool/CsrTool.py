import ipaddress
import logging
from typing import List, Tuple

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID

from csr_tool import utils
from csr_tool.errors import (
    ExtensionConstructionError,
    KeyGenerationError,
    NameConstructionError,
    OutputEncodingError,
    SerializationError,
    SigningError,
)
from csr_tool.pydantic_schemas import (
    DEFAULT_IDENTITY,
    DEFAULT_KEY_SIZE,
    KeyAndCsrModel,
    SubjectConfig,
)

log = logging.getLogger(__name__)

PUBLIC_EXPONENT = 65537

# Netscape cert type, BIT STRING with only bit 1 (SSL server) set
NS_CERT_TYPE_OID = x509.ObjectIdentifier("2.16.840.1.113730.1.1")
NS_CERT_TYPE_SERVER = b"\x03\x02\x06\x40"

SAN_IP_ADDRESS = "127.0.0.1"
SAN_DNS_NAME = "localhost"


def _hash() -> hashes.HashAlgorithm:
    return hashes.SHA256()


@utils.benchmark
def generate_private_key(key_size: int = DEFAULT_KEY_SIZE) -> rsa.RSAPrivateKey:
    """
    Create an RSA private key just in memory, the public key is available from it
    randomness comes from the OS via the cryptography module
    """
    try:
        private_key = rsa.generate_private_key(
            public_exponent=PUBLIC_EXPONENT, key_size=key_size
        )
    except (ValueError, TypeError, OverflowError) as e:
        raise KeyGenerationError(
            f"couldn't generate an RSA key of size {key_size}: {e}"
        ) from e
    log.info(f"Private key created: RSA - size: {private_key.key_size}")
    return private_key


def build_subject(identity: str, subject: SubjectConfig | None = None) -> x509.Name:
    """
    The subject in the order the CA expects: C, ST, L, O, CN, emailAddress
    the identity is used as the common name without any change
    """
    if subject is None:
        subject = SubjectConfig()

    fields = [
        ("Country", NameOID.COUNTRY_NAME, subject.country),
        ("State", NameOID.STATE_OR_PROVINCE_NAME, subject.state),
        ("City", NameOID.LOCALITY_NAME, subject.city),
        ("Organization", NameOID.ORGANIZATION_NAME, subject.organization),
        ("Identity (common name)", NameOID.COMMON_NAME, identity),
        ("Email address", NameOID.EMAIL_ADDRESS, subject.email),
    ]
    attributes = []
    for label, oid, value in fields:
        try:
            attributes.append(x509.NameAttribute(oid, value))
        except (ValueError, TypeError) as e:
            raise NameConstructionError(f"couldn't set the {label}: {e}") from e
    return x509.Name(attributes)


def build_extensions(public_key) -> List[Tuple[x509.ExtensionType, bool]]:
    """
    Extensions requested for a TLS server cert, as (extension, critical) pairs
    the subject key identifier is derived from the public key of the request
    """
    try:
        return [
            (x509.UnrecognizedExtension(NS_CERT_TYPE_OID, NS_CERT_TYPE_SERVER), False),
            (x509.SubjectKeyIdentifier.from_public_key(public_key), False),
            (
                x509.KeyUsage(
                    digital_signature=True,
                    content_commitment=False,
                    key_encipherment=True,
                    data_encipherment=False,
                    key_agreement=False,
                    key_cert_sign=False,
                    crl_sign=False,
                    encipher_only=False,
                    decipher_only=False,
                ),
                True,
            ),
            (x509.ExtendedKeyUsage([ExtendedKeyUsageOID.SERVER_AUTH]), False),
            (
                x509.SubjectAlternativeName(
                    [
                        x509.IPAddress(ipaddress.ip_address(SAN_IP_ADDRESS)),
                        x509.DNSName(SAN_DNS_NAME),
                    ]
                ),
                False,
            ),
        ]
    except (ValueError, TypeError) as e:
        raise ExtensionConstructionError(f"couldn't build the extensions: {e}") from e


def create_csr(
    private_key, identity: str, subject: SubjectConfig | None = None
) -> x509.CertificateSigningRequest:
    """
    Create a certificate signing request that will need to be sent to the CA to be signed
    the builder signs once at the end, so the signature covers the extensions too
    """
    log.info(f"CSR for: {identity}")
    b = x509.CertificateSigningRequestBuilder().subject_name(
        build_subject(identity, subject)
    )

    for extension, critical in build_extensions(private_key.public_key()):
        try:
            b = b.add_extension(extension, critical=critical)
        except (ValueError, TypeError) as e:
            raise ExtensionConstructionError(
                f"couldn't add the extension {extension.oid.dotted_string}: {e}"
            ) from e

    try:
        csr = b.sign(private_key, _hash())
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise SigningError(f"couldn't sign the csr for {identity}: {e}") from e

    log.info(
        f"CSR created: {csr.subject.rfc4514_string()} - signature is valid: {csr.is_signature_valid}"
    )
    return csr


def generate_csr_from_key(
    private_key, identity: str, subject: SubjectConfig | None = None
) -> bytes:
    """Certificate signing request from the key, in pem format"""
    csr = create_csr(private_key, identity, subject)
    try:
        return csr.public_bytes(encoding=serialization.Encoding.PEM)
    except (ValueError, TypeError) as e:
        raise SerializationError(f"couldn't write the csr as pem: {e}") from e


def private_key_to_pem(private_key) -> bytes:
    """PKCS#8 pem, not encrypted"""
    try:
        return private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    except (ValueError, TypeError, AttributeError) as e:
        raise SerializationError(f"couldn't write the private key as pem: {e}") from e


def pem_to_text(pem: bytes) -> str:
    try:
        return pem.decode("ascii")
    except UnicodeDecodeError as e:
        raise OutputEncodingError(f"pem data is not printable text: {e}") from e


def generate_key_and_csr(
    key_size: int = DEFAULT_KEY_SIZE,
    identity: str = DEFAULT_IDENTITY,
    subject: SubjectConfig | None = None,
) -> KeyAndCsrModel:
    """
    Make a new private key and a csr for the identity signed with it
    both are returned as pem text, nothing is written to disk
    """
    private_key = generate_private_key(key_size)
    csr_pem = generate_csr_from_key(private_key, identity, subject)
    return KeyAndCsrModel(
        private_key=pem_to_text(private_key_to_pem(private_key)),
        csr=pem_to_text(csr_pem),
    )
