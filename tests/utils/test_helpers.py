"""
Unit Tests for Utility Functions

Tests handle generation, mention scanning and credential helpers.
"""

from parley.utils.helpers import (
    excerpt,
    find_mentions,
    generate_handle,
    hash_token,
    is_valid_email,
    is_valid_handle,
    new_token,
    password_context,
)


def test_generate_handle_basic():
    """Names are concatenated, lowercased and stripped of symbols."""
    assert generate_handle("Alice", "Person", []) == "aliceperson"
    assert generate_handle("Jean-Luc", "O'Neil", []) == "jeanluconeil"


def test_generate_handle_truncates_to_twenty():
    handle = generate_handle("Maximilianus", "Bartholomew", [])
    assert handle == "maximilianusbartholo"
    assert len(handle) == 20


def test_generate_handle_suffixes_from_zero():
    assert generate_handle("Alice", "Person", ["aliceperson"]) == "aliceperson0"
    assert generate_handle("Alice", "Person", ["aliceperson", "aliceperson0"]) == "aliceperson1"


def test_generate_handle_suffix_after_truncation():
    """The suffix is appended to the 20-character base."""
    taken = ["maximilianusbartholo"]
    assert generate_handle("Maximilianus", "Bartholomew", taken) == "maximilianusbartholo0"


def test_find_mentions_in_order_with_duplicates():
    assert find_mentions("hi @bob and @carol, @bob again") == ["bob", "carol,", "bob"]


def test_find_mentions_one_candidate_per_at_sign():
    """Each "@" starts a candidate that runs to the next whitespace."""
    assert find_mentions("@bob@carol") == ["bob@carol", "carol"]
    assert find_mentions("hey @bob@carol @dave") == ["bob@carol", "carol", "dave"]
    assert find_mentions("a@@b") == ["@b", "b"]


def test_find_mentions_none():
    assert find_mentions("no mentions here") == []
    assert find_mentions("email me at") == []


def test_excerpt_cuts_without_ellipsis():
    assert excerpt("hello @johnmate how is it going today?") == "hello @johnmate how "
    assert excerpt("short") == "short"
    assert excerpt("abcdef", 3) == "abc"


def test_email_validation():
    assert is_valid_email("alice@example.com")
    assert is_valid_email("a.b+c@mail.example.co")
    assert not is_valid_email("alice")
    assert not is_valid_email("alice@")
    assert not is_valid_email("alice@example")
    assert not is_valid_email("two@@example.com")
    assert not is_valid_email("spaced out@example.com")


def test_handle_validation():
    assert is_valid_handle("abc")
    assert is_valid_handle("a" * 20)
    assert not is_valid_handle("ab")
    assert not is_valid_handle("a" * 21)
    assert not is_valid_handle("has space")
    assert not is_valid_handle("dash-ed")


def test_password_hash_round_trip():
    passwords = password_context(rounds=4)
    stored = passwords.hash("secret123")
    assert "secret123" not in stored
    assert stored.startswith("$bcrypt-sha256$")
    assert passwords.verify("secret123", stored)
    assert not passwords.verify("secret124", stored)


def test_password_hash_is_salted():
    passwords = password_context(rounds=4)
    assert passwords.hash("secret123") != passwords.hash("secret123")


def test_long_passwords_are_not_truncated():
    """bcrypt alone ignores bytes past 72; the sha256 pre-hash keeps them."""
    passwords = password_context(rounds=4)
    stored = passwords.hash("x" * 80 + "a")
    assert not passwords.verify("x" * 80 + "b", stored)


def test_tokens_are_unique_and_hashed():
    first, second = new_token(), new_token()
    assert first != second
    assert hash_token(first) == hash_token(first)
    assert hash_token(first) != first
