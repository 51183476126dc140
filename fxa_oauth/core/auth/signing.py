"""
BrowserID signing provider.

Generates ephemeral key pairs, signs assertions and bundles them with
certificates, in the format the identity service and the OAuth server
understand:

- Public keys are exchanged as "simple objects": DSA parameters as
  lowercase hex, RSA parameters as decimal strings.
- Assertions are compact JWS strings whose payload carries ``exp``
  (milliseconds since the epoch) and ``aud``.
- DSA signatures are the raw ``r || s`` pair, each left-padded to the
  byte length of ``q``, not DER.
- A bundle is ``cert~...~cert~assertion``.
"""

from __future__ import annotations

import logging
import typing
from dataclasses import dataclass

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import dsa, padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)

from .constants import AssertionDefaults, JwsProtocol
from .exceptions import SigningError
from .jws import b64url_decode, b64url_encode, decode_jws, signing_input, split_jws

_logger = logging.getLogger(__name__)

PrivateKey = typing.Union[dsa.DSAPrivateKey, rsa.RSAPrivateKey]
PublicKey = typing.Union[dsa.DSAPublicKey, rsa.RSAPublicKey]


@dataclass(frozen=True)
class KeyAlgorithm:
    """A supported (algorithm, key size) combination.

    Attributes:
        algorithm: Family tag used in the public key object ("DS" or "RS")
        key_size: BrowserID key size (128 or 256)
        jws_alg: JWS "alg" header value, e.g. "DS128"
        modulus_bits: Size of the underlying DSA prime / RSA modulus
        hash_algorithm: Hash used when signing
    """

    algorithm: str
    key_size: int
    jws_alg: str
    modulus_bits: int
    hash_algorithm: type[hashes.HashAlgorithm]


KEY_ALGORITHMS: dict[tuple[str, int], KeyAlgorithm] = {
    ("DS", 128): KeyAlgorithm("DS", 128, "DS128", 1024, hashes.SHA1),
    ("DS", 256): KeyAlgorithm("DS", 256, "DS256", 2048, hashes.SHA256),
    ("RS", 256): KeyAlgorithm("RS", 256, "RS256", 2048, hashes.SHA256),
}

_BY_JWS_ALG = {alg.jws_alg: alg for alg in KEY_ALGORITHMS.values()}


def get_key_algorithm(algorithm: str, key_size: int) -> KeyAlgorithm:
    """Look up a supported key algorithm.

    Raises:
        SigningError: If the combination is not supported
    """
    try:
        return KEY_ALGORITHMS[(algorithm.upper(), key_size)]
    except (KeyError, AttributeError):
        supported = ", ".join(f"{a}/{s}" for a, s in KEY_ALGORITHMS)
        raise SigningError(
            f"Unsupported key algorithm {algorithm}/{key_size} (supported: {supported})"
        ) from None


@dataclass(frozen=True)
class SigningKey:
    """A private key tagged with the algorithm it signs for."""

    algorithm: KeyAlgorithm
    key: PrivateKey


@dataclass
class KeyPair:
    """Ephemeral key pair.

    The secret key is dropped by discard(); a discarded pair can still
    export its public key but can no longer sign.
    """

    algorithm: KeyAlgorithm
    public_key: PublicKey
    secret_key: SigningKey | None

    def to_simple_object(self) -> dict[str, str]:
        """Serialize the public key in its exchange format."""
        return serialize_public_key(self.public_key)

    def discard(self) -> None:
        self.secret_key = None

    @property
    def discarded(self) -> bool:
        return self.secret_key is None


def serialize_public_key(public_key: PublicKey) -> dict[str, str]:
    """Serialize a public key as a BrowserID simple object."""
    if isinstance(public_key, dsa.DSAPublicKey):
        numbers = public_key.public_numbers()
        params = numbers.parameter_numbers
        return {
            "algorithm": "DS",
            "y": format(numbers.y, "x"),
            "p": format(params.p, "x"),
            "q": format(params.q, "x"),
            "g": format(params.g, "x"),
        }
    if isinstance(public_key, rsa.RSAPublicKey):
        rsa_numbers = public_key.public_numbers()
        return {
            "algorithm": "RS",
            "n": str(rsa_numbers.n),
            "e": str(rsa_numbers.e),
        }
    raise SigningError(f"Unsupported public key type: {type(public_key).__name__}")


def deserialize_public_key(obj: typing.Mapping[str, str]) -> PublicKey:
    """Rebuild a public key from its BrowserID simple object.

    Raises:
        SigningError: If the object is malformed or of an unknown algorithm
    """
    try:
        if obj["algorithm"] == "DS":
            params = dsa.DSAParameterNumbers(
                p=int(obj["p"], 16), q=int(obj["q"], 16), g=int(obj["g"], 16)
            )
            return dsa.DSAPublicNumbers(y=int(obj["y"], 16), parameter_numbers=params).public_key()
        if obj["algorithm"] == "RS":
            return rsa.RSAPublicNumbers(e=int(obj["e"]), n=int(obj["n"])).public_key()
    except (KeyError, TypeError, ValueError) as e:
        raise SigningError(f"Malformed public key object: {e}") from e
    raise SigningError(f"Unsupported public key algorithm: {obj.get('algorithm')!r}")


class SigningProvider:
    """Key generation, assertion signing and bundling.

    Example:
        >>> provider = SigningProvider()
        >>> keypair = provider.generate_keypair("DS", 128)
        >>> assertion = provider.sign_assertion(
        ...     {}, "https://oauth.example.com", expires_at, keypair.secret_key
        ... )
        >>> bundle = provider.bundle([cert], assertion)
    """

    def generate_keypair(
        self,
        algorithm: str = AssertionDefaults.ALGORITHM,
        key_size: int = AssertionDefaults.KEY_SIZE,
    ) -> KeyPair:
        """Generate a fresh key pair.

        Raises:
            SigningError: If the algorithm is unsupported or generation fails
        """
        alg = get_key_algorithm(algorithm, key_size)
        try:
            private_key: PrivateKey
            if alg.algorithm == "DS":
                private_key = dsa.generate_private_key(key_size=alg.modulus_bits)
            else:
                private_key = rsa.generate_private_key(
                    public_exponent=65537, key_size=alg.modulus_bits
                )
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise SigningError(f"Key generation failed for {alg.jws_alg}: {e}") from e

        _logger.debug("generated %s keypair", alg.jws_alg)
        return KeyPair(
            algorithm=alg,
            public_key=private_key.public_key(),
            secret_key=SigningKey(alg, private_key),
        )

    def sign_assertion(
        self,
        claims: typing.Mapping[str, typing.Any],
        audience: str,
        expires_at: int,
        secret_key: SigningKey | None,
    ) -> str:
        """Sign an assertion over audience, valid until expires_at (ms).

        Raises:
            SigningError: If the key was discarded or signing fails
        """
        if secret_key is None:
            raise SigningError("Cannot sign: secret key is not available")

        payload = dict(claims)
        payload["exp"] = expires_at
        payload["aud"] = audience
        header = {"alg": secret_key.algorithm.jws_alg}

        data = signing_input(header, payload)
        try:
            signature = self._sign(secret_key, data.encode("ascii"))
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise SigningError(f"Assertion signing failed: {e}") from e
        return f"{data}.{b64url_encode(signature)}"

    def bundle(self, certs: typing.Sequence[str], assertion: str) -> str:
        """Join certificates and the assertion into one bundle string."""
        return JwsProtocol.BUNDLE_SEPARATOR.join([*certs, assertion])

    def verify_assertion(self, assertion: str, public_key: typing.Mapping[str, str]) -> bool:
        """Check an assertion's signature against a public key object.

        Returns:
            True if the signature is valid, False otherwise
        """
        try:
            header, _ = decode_jws(assertion)
            header_part, payload_part, signature_part = split_jws(assertion)
            signature = b64url_decode(signature_part)
        except ValueError:
            return False

        alg = _BY_JWS_ALG.get(header.get("alg", ""))
        if alg is None:
            return False

        key = deserialize_public_key(public_key)
        data = f"{header_part}.{payload_part}".encode("ascii")
        try:
            if isinstance(key, dsa.DSAPublicKey):
                half = len(signature) // 2
                if len(signature) % 2 or not half:
                    return False
                der = encode_dss_signature(
                    int.from_bytes(signature[:half], "big"),
                    int.from_bytes(signature[half:], "big"),
                )
                key.verify(der, data, alg.hash_algorithm())
            else:
                key.verify(signature, data, padding.PKCS1v15(), alg.hash_algorithm())
        except InvalidSignature:
            return False
        return True

    @staticmethod
    def _sign(secret_key: SigningKey, data: bytes) -> bytes:
        alg = secret_key.algorithm
        key = secret_key.key
        if isinstance(key, dsa.DSAPrivateKey):
            r, s = decode_dss_signature(key.sign(data, alg.hash_algorithm()))
            q = key.parameters().parameter_numbers().q
            width = (q.bit_length() + 7) // 8
            return r.to_bytes(width, "big") + s.to_bytes(width, "big")
        return key.sign(data, padding.PKCS1v15(), alg.hash_algorithm())


__all__ = [
    "KeyAlgorithm",
    "KEY_ALGORITHMS",
    "get_key_algorithm",
    "SigningKey",
    "KeyPair",
    "serialize_public_key",
    "deserialize_public_key",
    "SigningProvider",
]
