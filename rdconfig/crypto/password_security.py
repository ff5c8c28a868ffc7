"""
Field-level and blob encryption for persisted secrets.

Sensitive fields are stored as ``<version><base64(ciphertext)>``. Decrypting
something that was never encrypted hands the input back unchanged, which is
what lets older plaintext files load and be migrated on the next store.

The key is derived from the machine identity, so config files copied to
another machine do not reveal their secrets. Ciphertext is deterministic
for a given key and plaintext: the nonce is a keyed BLAKE2b digest of the
plaintext, so storing an unchanged record twice yields identical bytes.

Usage:
    from rdconfig.crypto.password_security import (
        encrypt_str_or_original,
        decrypt_str_or_original,
    )

    stored = encrypt_str_or_original("secret", "00", 128)
    plain, was_encrypted, needs_rewrite = decrypt_str_or_original(stored, "00")
"""

import base64
import binascii
import logging
import secrets
import subprocess
import threading
import uuid
from pathlib import Path
from typing import Optional, Tuple

import nacl.encoding
import nacl.exceptions
import nacl.hash
import nacl.secret
import nacl.signing
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..constants import CHARS, IS_WINDOWS, NUM_CHARS, PASSWORD_ENC_VERSION
from ..utils.error_handling import ErrorCategory, SecretError, with_error_handling

logger = logging.getLogger(__name__)

VERSION_LEN = len(PASSWORD_ENC_VERSION)

KDF_SALT = b"rdconfig.machine-key.v1"
KDF_ITERATIONS = 100_000

_MACHINE_ID_FILES = (
    Path("/etc/machine-id"),
    Path("/var/lib/dbus/machine-id"),
)


# =============================================================================
# MACHINE KEY
# =============================================================================

@with_error_handling(category=ErrorCategory.PLATFORM, default_return=None)
def _windows_machine_guid() -> Optional[str]:
    import winreg
    with winreg.OpenKey(
        winreg.HKEY_LOCAL_MACHINE,
        r"SOFTWARE\Microsoft\Cryptography",
        0,
        winreg.KEY_READ | winreg.KEY_WOW64_64KEY,
    ) as key:
        value, _ = winreg.QueryValueEx(key, "MachineGuid")
        return str(value)


@with_error_handling(category=ErrorCategory.PLATFORM, default_return=None)
def _macos_platform_uuid() -> Optional[str]:
    output = subprocess.run(
        ["ioreg", "-rd1", "-c", "IOPlatformExpertDevice"],
        capture_output=True,
        text=True,
        timeout=5,
        check=True,
    ).stdout
    for line in output.splitlines():
        if "IOPlatformUUID" in line:
            return line.split("=")[-1].strip().strip('"')
    return None


def machine_id() -> str:
    """Stable identifier of this machine, used as key material."""
    for path in _MACHINE_ID_FILES:
        try:
            value = path.read_text().strip()
        except OSError:
            continue
        if value:
            return value

    if IS_WINDOWS:
        value = _windows_machine_guid()
        if value:
            return value
    elif Path("/usr/sbin/ioreg").exists():
        value = _macos_platform_uuid()
        if value:
            return value

    logger.debug("No machine id source found, falling back to the hardware address")
    return f"{uuid.getnode():012x}"


def derive_key(material: bytes) -> bytes:
    """Derive a 32-byte secret-box key from arbitrary key material."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=nacl.secret.SecretBox.KEY_SIZE,
        salt=KDF_SALT,
        iterations=KDF_ITERATIONS,
    )
    return kdf.derive(material)


_machine_key: Optional[bytes] = None
_machine_key_lock = threading.Lock()


def machine_key() -> bytes:
    global _machine_key
    with _machine_key_lock:
        if _machine_key is None:
            _machine_key = derive_key(machine_id().encode('utf-8'))
        return _machine_key


# =============================================================================
# CIPHER
# =============================================================================

class FieldCipher:
    """
    Symmetric cipher for config secrets.

    Args:
        key: 32-byte secret-box key; the machine key when omitted
    """

    def __init__(self, key: Optional[bytes] = None):
        self._key = key if key is not None else machine_key()
        if len(self._key) != nacl.secret.SecretBox.KEY_SIZE:
            raise ValueError(f"key must be {nacl.secret.SecretBox.KEY_SIZE} bytes")
        self._box = nacl.secret.SecretBox(self._key)

    def _nonce(self, data: bytes) -> bytes:
        return nacl.hash.blake2b(
            data,
            digest_size=nacl.secret.SecretBox.NONCE_SIZE,
            key=self._key,
            encoder=nacl.encoding.RawEncoder,
        )

    def symmetric_crypt(self, data: bytes, encrypt: bool) -> bytes:
        """
        Encrypt or decrypt a whole blob.

        Raises:
            SecretError: if ``data`` is not a valid ciphertext for this key
        """
        if encrypt:
            return bytes(self._box.encrypt(bytes(data), self._nonce(bytes(data))))
        try:
            return self._box.decrypt(bytes(data))
        except (nacl.exceptions.CryptoError, ValueError, TypeError) as e:
            raise SecretError(f"blob decryption failed: {e}") from e

    # -- strings --------------------------------------------------------------

    def decrypt_str_or_original(self, value: str, version: str = PASSWORD_ENC_VERSION) -> Tuple[str, bool, bool]:
        """
        Returns ``(plain, was_encrypted, needs_rewrite)``.

        A value that does not decrypt is returned unchanged; it asks for a
        rewrite when non-empty so the next store encrypts it.
        """
        if len(value) > VERSION_LEN and value.startswith(version):
            try:
                raw = base64.b64decode(value[VERSION_LEN:], validate=True)
                return self.symmetric_crypt(raw, False).decode('utf-8'), True, False
            except (binascii.Error, SecretError, UnicodeDecodeError):
                pass
        return value, False, value != ""

    def encrypt_str_or_original(self, value: str, version: str, max_len: int) -> str:
        if self.decrypt_str_or_original(value, version)[1]:
            logger.error("Duplicate encryption!")
            return value
        raw = value.encode('utf-8')
        if 0 < len(raw) <= max_len:
            return version + base64.b64encode(self.symmetric_crypt(raw, True)).decode('ascii')
        return value

    # -- byte strings ---------------------------------------------------------

    def decrypt_vec_or_original(self, value: bytes, version: str = PASSWORD_ENC_VERSION) -> Tuple[bytes, bool, bool]:
        prefix = version.encode('ascii')
        if len(value) > VERSION_LEN and value.startswith(prefix):
            try:
                raw = base64.b64decode(value[VERSION_LEN:], validate=True)
                return self.symmetric_crypt(raw, False), True, False
            except (binascii.Error, SecretError):
                pass
        return bytes(value), False, len(value) > 0

    def encrypt_vec_or_original(self, value: bytes, version: str, max_len: int) -> bytes:
        if self.decrypt_vec_or_original(value, version)[1]:
            logger.error("Duplicate encryption!")
            return bytes(value)
        if 0 < len(value) <= max_len:
            return version.encode('ascii') + base64.b64encode(self.symmetric_crypt(value, True))
        return bytes(value)


_default_cipher: Optional[FieldCipher] = None
_default_cipher_lock = threading.Lock()


def get_default_cipher() -> FieldCipher:
    global _default_cipher
    with _default_cipher_lock:
        if _default_cipher is None:
            _default_cipher = FieldCipher()
        return _default_cipher


def symmetric_crypt(data: bytes, encrypt: bool) -> bytes:
    return get_default_cipher().symmetric_crypt(data, encrypt)


def encrypt_str_or_original(value: str, version: str, max_len: int) -> str:
    return get_default_cipher().encrypt_str_or_original(value, version, max_len)


def decrypt_str_or_original(value: str, version: str) -> Tuple[str, bool, bool]:
    return get_default_cipher().decrypt_str_or_original(value, version)


def encrypt_vec_or_original(value: bytes, version: str, max_len: int) -> bytes:
    return get_default_cipher().encrypt_vec_or_original(value, version, max_len)


def decrypt_vec_or_original(value: bytes, version: str) -> Tuple[bytes, bool, bool]:
    return get_default_cipher().decrypt_vec_or_original(value, version)


# =============================================================================
# KEYS AND PASSWORDS
# =============================================================================

def generate_keypair() -> Tuple[bytes, bytes]:
    """
    Generate an Ed25519 signing keypair.

    Returns ``(sk, pk)`` where ``sk`` is the 64-byte seed+public form and
    ``pk`` the 32-byte verify key.
    """
    signing_key = nacl.signing.SigningKey.generate()
    pk = bytes(signing_key.verify_key)
    return bytes(signing_key) + pk, pk


def random_password(length: int, numeric: bool = False) -> str:
    chars = NUM_CHARS if numeric else CHARS
    return "".join(secrets.choice(chars) for _ in range(length))


__all__ = [
    'VERSION_LEN',
    'FieldCipher',
    'derive_key',
    'machine_id',
    'machine_key',
    'get_default_cipher',
    'symmetric_crypt',
    'encrypt_str_or_original',
    'decrypt_str_or_original',
    'encrypt_vec_or_original',
    'decrypt_vec_or_original',
    'generate_keypair',
    'random_password',
]
