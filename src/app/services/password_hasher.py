import bcrypt

DEFAULT_ROUNDS = 10


class PasswordHasher:
    """
    One-way password hashing with bcrypt.

    Business Rules:
    - Fixed cost factor (10 unless configured otherwise)
    - verify never raises; mismatches and malformed hashes return False
    - dummy_verify keeps unknown-account logins as slow as wrong passwords
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self.rounds = rounds
        self._dummy_hash = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(rounds))

    def hash(self, plaintext: str) -> str:
        if not plaintext or not isinstance(plaintext, str):
            raise ValueError("Password must be a non-empty string")
        encoded = plaintext.encode("utf-8")
        if len(encoded) > 72:
            raise ValueError("Password must be at most 72 bytes")
        return bcrypt.hashpw(encoded, bcrypt.gensalt(self.rounds)).decode("utf-8")

    def verify(self, plaintext: str, hashed: str) -> bool:
        if not plaintext or not hashed:
            return False
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), hashed.encode("utf-8"))
        except (ValueError, TypeError):
            return False

    def dummy_verify(self, plaintext: str) -> None:
        self.verify(plaintext or "x", self._dummy_hash.decode("utf-8"))
