import pickle

import pytest

from caves.exceptions import DecodeError, InvalidLength, InvalidMapKey
from caves.generator.map_key import SEED_SIZE, MapKey

from conftest import FIXED_KEY


def test_printed_key_parses_back_to_the_same_seed():
    key = MapKey.random()
    text = str(key)
    assert len(text) == 43
    assert "=" not in text
    assert MapKey.parse(text) == key
    assert MapKey.parse(f"  {text}\n") == key


def test_same_key_gives_same_random_stream():
    key = MapKey(bytes(range(SEED_SIZE)))
    a, b = key.to_rng(), key.to_rng()
    assert [a.random() for _ in range(5)] == [b.random() for _ in range(5)]


def test_known_key_text():
    key = MapKey(b"\xff" * SEED_SIZE)
    assert str(key) == "_" * 42 + "8"
    assert repr(key) == f'MapKey("{key}")'


def test_wrong_seed_length_is_rejected():
    with pytest.raises(InvalidLength):
        MapKey(b"short")
    # Valid base64 but only 3 bytes
    with pytest.raises(InvalidLength):
        MapKey.parse("AAAA")


@pytest.mark.parametrize("text", ["not a key!", "AAAA=", "A", "a+b/"])
def test_malformed_text_is_a_decode_error(text):
    with pytest.raises(DecodeError):
        MapKey.parse(text)


def test_trailing_bits_in_last_character_are_rejected():
    # "9" decodes to the same bytes as the canonical "8"
    assert MapKey.parse(FIXED_KEY).seed == bytes(range(SEED_SIZE))
    with pytest.raises(DecodeError):
        MapKey.parse(FIXED_KEY[:-1] + "9")


def test_errors_share_a_base_class():
    with pytest.raises(InvalidMapKey):
        MapKey.parse("???")
    with pytest.raises(ValueError):
        MapKey.parse("???")


def test_keys_hash_and_pickle():
    key = MapKey.random()
    assert len({key, MapKey(key.seed)}) == 1
    assert pickle.loads(pickle.dumps(key)) == key
