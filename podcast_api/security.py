"""
Password hashing and token signing primitives.

Passwords are hashed with bcrypt.  Tokens are HS256 JWTs produced by
python-jose whose only claim is the user id, matching what the account
service hands out on login.
"""
import bcrypt
from jose import jwt


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, hashed: str) -> bool:
    return bcrypt.checkpw(password.encode(), hashed.encode())


class JwtService:
    """
    Issues and verifies signed tokens for authenticated users.

    ``verify`` lets ``jose.JWTError`` propagate so callers can decide how
    an invalid or tampered token should be reported.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256") -> None:
        self.secret_key = secret_key
        self.algorithm = algorithm

    def sign(self, user_id: int) -> str:
        return jwt.encode({"id": user_id}, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> dict:
        return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
