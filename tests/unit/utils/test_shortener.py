import re
import uuid

import pytest

from kvshortener.utils import shortener
from kvshortener.utils.shortener import generate_key


def test_generate_key_default_length():
    key = generate_key()

    assert re.fullmatch(r'[0-9a-f]{6}', key)


@pytest.mark.parametrize('length', [1, 8, 32])
def test_generate_key_length(length):
    assert len(generate_key(length)) == length


def test_generate_key_uses_uuid4(monkeypatch):
    monkeypatch.setattr(shortener.uuid, 'uuid4', lambda: uuid.UUID('3f9a1c7e-0000-4000-8000-000000000000'))

    assert generate_key() == '3f9a1c'
    assert generate_key(10) == '3f9a1c7e00'


def test_generate_key_varies():
    assert len({generate_key() for _ in range(100)}) > 90


@pytest.mark.parametrize('length', ['6', 6.0, True, None])
def test_generate_key_invalid_type(length):
    with pytest.raises(TypeError):
        generate_key(length)


@pytest.mark.parametrize('length', [0, -1, 33])
def test_generate_key_invalid_length(length):
    with pytest.raises(ValueError):
        generate_key(length)
