"""
Flotify - Password Hashing Utilities

Password hashing using bcrypt.
The work factor is fixed at 8, trading some brute-force resistance for
login latency; the digest embeds algorithm, cost and salt so verification
needs nothing but the stored string.

Security:
- Never log or expose plaintext passwords
- Verification failures are a single undifferentiated False
"""

import bcrypt


# Work factor for bcrypt (2^8 = 256 iterations)
BCRYPT_WORK_FACTOR = 8

# Enforced on characters at the HTTP boundary
MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 64


# bcrypt only reads the first 72 bytes of input
_BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, work_factor: int = BCRYPT_WORK_FACTOR) -> str:
    """
    Hash a password using bcrypt.
    
    Args:
        password: Plaintext password
        work_factor: bcrypt cost factor
        
    Returns:
        bcrypt hash string (includes salt and cost)
        
    Example:
        >>> hashed = hash_password("SecurePass123")
        >>> hashed.startswith("$2b$08$")
        True
    """
    salt = bcrypt.gensalt(rounds=work_factor)
    hashed = bcrypt.hashpw(_encode(password), salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against a bcrypt hash.
    
    Uses bcrypt's constant-time comparison. Returns False instead of
    raising for a wrong password or a malformed digest, so callers
    cannot tell the two apart.
    
    Args:
        plain_password: Plaintext password to verify
        hashed_password: bcrypt hash to check against
        
    Returns:
        True if password matches, False otherwise
    """
    try:
        return bcrypt.checkpw(
            _encode(plain_password),
            hashed_password.encode("utf-8"),
        )
    except (ValueError, TypeError, AttributeError):
        # Invalid hash format
        return False


def needs_rehash(hashed_password: str, target_work_factor: int = BCRYPT_WORK_FACTOR) -> bool:
    """
    Check if a password hash was made with a lower cost than configured.
    
    Args:
        hashed_password: Existing bcrypt hash
        target_work_factor: Desired work factor
        
    Returns:
        True if hash should be regenerated
    """
    try:
        # bcrypt hash format: $2b$XX$...
        _, work_factor_str, _ = hashed_password.split("$")[1:4]
        return int(work_factor_str) < target_work_factor
    except (ValueError, IndexError):
        # Not a valid bcrypt hash, definitely needs rehash
        return True


def password_length_ok(password: str) -> bool:
    return MIN_PASSWORD_LENGTH <= len(password) <= MAX_PASSWORD_LENGTH
