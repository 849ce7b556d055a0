"""
Unit tests for password hashing, invitation tokens and JWTs.
"""

from bursary.core.security import (
    create_access_token,
    decode_token,
    generate_invitation_token,
    hash_password,
    hash_token,
    verify_password,
)


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = hash_password("s3cret-pass")
        assert hashed != "s3cret-pass"
        assert verify_password("s3cret-pass", hashed)
        assert not verify_password("wrong-pass", hashed)


class TestInvitationTokens:
    """Tests for token generation and hashing."""

    def test_tokens_are_unique(self):
        assert generate_invitation_token() != generate_invitation_token()

    def test_hash_is_sha256_hex(self):
        result = hash_token("test_token")
        assert len(result) == 64
        int(result, 16)

    def test_hash_is_deterministic(self):
        assert hash_token("my_token") == hash_token("my_token")
        assert hash_token("token1") != hash_token("token2")


class TestAccessTokens:
    """Tests for JWT creation and verification."""

    def test_round_trip_claims(self):
        token = create_access_token(
            subject="abc",
            principal="admin",
            additional_claims={"email": "ward@bursary.org"},
        )
        claims = decode_token(token)

        assert claims["sub"] == "abc"
        assert claims["principal"] == "admin"
        assert claims["type"] == "access"
        assert claims["email"] == "ward@bursary.org"

    def test_expired_token_rejected(self):
        token = create_access_token(subject="abc", principal="student", expires_minutes=-5)
        assert decode_token(token) is None

    def test_tampered_token_rejected(self):
        token = create_access_token(subject="abc", principal="student")
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[::-1]])
        assert decode_token(tampered) is None

    def test_garbage_rejected(self):
        assert decode_token("not-a-jwt") is None
