import pytest

from notes_session.auth.credentials import PlainTextCredentials, SaltedHashCredentials


def test_plain_text_stores_password_verbatim():
    policy = PlainTextCredentials()
    assert policy.encode("p1 ") == "p1 "
    assert policy.verify("p1 ", "p1 ")
    assert not policy.verify("p1", "p1 ")


def test_salted_hash_uses_fresh_salt_per_encode():
    policy = SaltedHashCredentials(iterations=1000)
    first, second = policy.encode("secret"), policy.encode("secret")

    assert first != second
    assert policy.verify("secret", first)
    assert policy.verify("secret", second)
    assert not policy.verify("Secret", first)


def test_salted_hash_reads_iterations_from_stored_value():
    stored = SaltedHashCredentials(iterations=1000).encode("secret")
    assert SaltedHashCredentials(iterations=5000).verify("secret", stored)


@pytest.mark.parametrize(
    "stored",
    [
        "secret",
        "pbkdf2_sha256$1000$zz$00",
        "pbkdf2_sha256$abc$00$00",
        "pbkdf2_sha256$0$00$00",
        "md5$1000$00$00",
    ],
)
def test_salted_hash_rejects_malformed_stored_values(stored):
    assert not SaltedHashCredentials(iterations=1000).verify("secret", stored)


def test_salted_hash_requires_positive_iterations():
    with pytest.raises(ValueError):
        SaltedHashCredentials(iterations=0)
