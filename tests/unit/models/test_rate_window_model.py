import pytest

from kvshortener.models import RateWindowModel


def test_from_json_missing_record():
    window = RateWindowModel.from_json('203.0.113.7', None)

    assert window.identity == '203.0.113.7'
    assert window.timestamps == ()
    assert len(window) == 0


def test_from_json_round_trip():
    window = RateWindowModel.from_json('unknown', '[1000, 2000, 3000]')

    assert window.timestamps == (1000, 2000, 3000)
    assert window.to_json() == '[1000, 2000, 3000]'


@pytest.mark.parametrize('raw', ['not json', '{"a": 1}', '[1, "2"]', '[1.5]', '[true]', '"[]"'])
def test_from_json_rejects_malformed_records(raw):
    with pytest.raises(ValueError):
        RateWindowModel.from_json('unknown', raw)


def test_pruned_drops_entries_at_or_beyond_window():
    window = RateWindowModel('unknown', (0, 1_000, 30_000, 59_999))

    # now - ts >= window is dropped: 0 and 1_000 are exactly/over 60s old
    assert window.pruned(now_ms=61_000, window_ms=60_000).timestamps == (30_000, 59_999)


def test_appended_returns_new_model():
    window = RateWindowModel('unknown', (1,))
    updated = window.appended(2)

    assert window.timestamps == (1,)
    assert updated.timestamps == (1, 2)
    assert updated.identity == 'unknown'
