"""Tests for password hashing and session token primitives."""

from huddle.core import security
from huddle.core.security import SessionToken

SHA256_HEX_DIGITS = 64


class TestSessionToken:
    def test_generated_tokens_are_long_and_distinct(self) -> None:
        tokens = {SessionToken.generate().reveal() for _ in range(50)}
        assert len(tokens) == 50
        # 32 random bytes, hex encoded.
        assert all(len(token) == 64 for token in tokens)

    def test_equality_is_by_value(self) -> None:
        raw = SessionToken.generate().reveal()
        assert SessionToken(raw) == SessionToken(raw)
        assert SessionToken(raw) != SessionToken(raw[:-1] + ("0" if raw[-1] != "0" else "1"))
        assert hash(SessionToken(raw)) == hash(SessionToken(raw))

    def test_repr_never_reveals_the_value(self) -> None:
        token = SessionToken.generate()
        assert token.reveal() not in repr(token)
        assert token.reveal() not in str(token)
        assert f"{token}" == "SessionToken(<redacted>)"

    def test_digest_is_sha256_of_the_raw_token(self) -> None:
        token = SessionToken("abc")
        assert token.digest() == security.hash_token("abc")
        assert len(token.digest()) == SHA256_HEX_DIGITS
        assert token.digest() != "abc"


class TestPasswords:
    def test_hash_and_verify(self) -> None:
        hashed = security.hash_password("correct horse", rounds=4)
        assert hashed.startswith("$2")
        assert security.verify_password("correct horse", hashed)
        assert not security.verify_password("wrong horse", hashed)

    def test_hashes_are_salted(self) -> None:
        assert security.hash_password("same", rounds=4) != security.hash_password("same", rounds=4)

    def test_cost_factor_is_embedded(self) -> None:
        assert security.hash_password("pw", rounds=5).startswith("$2b$05$")

    def test_long_passwords_are_accepted(self) -> None:
        long_password = "x" * 128
        hashed = security.hash_password(long_password, rounds=4)
        assert security.verify_password(long_password, hashed)

    def test_malformed_stored_hash_does_not_verify(self) -> None:
        assert not security.verify_password("anything", "not-a-bcrypt-hash")

    def test_dummy_hash_is_cached_per_cost(self) -> None:
        assert security.dummy_password_hash(4) == security.dummy_password_hash(4)
        assert security.dummy_password_hash(4).startswith("$2b$04$")


def test_constant_time_equals() -> None:
    assert security.constant_time_equals("ABC", "ABC")
    assert not security.constant_time_equals("ABC", "ABD")
    assert not security.constant_time_equals("ABC", "ABCD")
