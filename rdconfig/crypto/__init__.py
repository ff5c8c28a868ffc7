"""
Cryptographic helpers for the configuration store.

Provides:
- Versioned field-level encryption that passes plaintext through unchanged
- Whole-blob symmetric encryption keyed to the machine
- Signing keypair generation
- Blob compression
"""

from .compress import compress, decompress
from .password_security import (
    FieldCipher,
    decrypt_str_or_original,
    decrypt_vec_or_original,
    derive_key,
    encrypt_str_or_original,
    encrypt_vec_or_original,
    generate_keypair,
    get_default_cipher,
    machine_key,
    random_password,
    symmetric_crypt,
)

__all__ = [
    # Compression
    'compress',
    'decompress',

    # Field and blob encryption
    'FieldCipher',
    'derive_key',
    'machine_key',
    'get_default_cipher',
    'symmetric_crypt',
    'encrypt_str_or_original',
    'decrypt_str_or_original',
    'encrypt_vec_or_original',
    'decrypt_vec_or_original',

    # Keys and passwords
    'generate_keypair',
    'random_password',
]
