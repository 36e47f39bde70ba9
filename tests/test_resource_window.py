"""
Tests for resource windows and resource holds.
"""

import pytest

from models.resource import create_resource, get_all_resources, hold_resource
from models.resource_window import (
    MAINTENANCE,
    RESERVATION,
    create_window,
    delete_window,
    get_window_by_id,
    get_windows_for_date,
    list_windows,
    release_window_range,
    update_window,
)
from utils.errors import InvalidRangeError


class TestCreateWindow:
    """Tests for window creation."""

    def test_create_and_read(self, app, room_id):
        window_id = create_window(room_id, RESERVATION, '2025-06-10', '2025-06-12',
                                  reason='VIP guest', created_by='admin')

        window = get_window_by_id(window_id)
        assert window['resource_id'] == room_id
        assert window['kind'] == RESERVATION
        assert window['start_date'] == '2025-06-10'
        assert window['end_date'] == '2025-06-12'
        assert window['reason'] == 'VIP guest'

    def test_inverted_range_rejected(self, app, room_id):
        with pytest.raises(InvalidRangeError):
            create_window(room_id, MAINTENANCE, '2025-06-12', '2025-06-10')
        assert list_windows(room_id) == []

    def test_unknown_kind_rejected(self, app, room_id):
        with pytest.raises(ValueError):
            create_window(room_id, 'CLOSED', '2025-06-10', '2025-06-10')

    def test_invalid_slot_rejected(self, app, hall_id):
        with pytest.raises(ValueError):
            create_window(hall_id, RESERVATION, '2025-06-10', '2025-06-10', time_slot='LUNCH')

    def test_unknown_resource_rejected(self, app):
        with pytest.raises(ValueError):
            create_window(9999, RESERVATION, '2025-06-10', '2025-06-10')

    def test_overlapping_windows_kept(self, app, room_id):
        create_window(room_id, RESERVATION, '2025-06-10', '2025-06-12')
        create_window(room_id, RESERVATION, '2025-06-11', '2025-06-14')
        assert len(list_windows(room_id, RESERVATION)) == 2


class TestQueryWindows:
    """Tests for window listing and filtering."""

    def test_filter_by_range(self, app, room_id):
        create_window(room_id, RESERVATION, '2025-06-01', '2025-06-03')
        later_id = create_window(room_id, MAINTENANCE, '2025-06-10', '2025-06-12')

        windows = list_windows(room_id, date_from='2025-06-05', date_to='2025-06-30')
        assert [w['id'] for w in windows] == [later_id]

    def test_windows_for_date(self, app, room_id, hall_id):
        create_window(room_id, RESERVATION, '2025-06-01', '2025-06-03')
        create_window(hall_id, MAINTENANCE, '2025-06-02', '2025-06-02')

        assert len(get_windows_for_date('2025-06-02')) == 2
        assert len(get_windows_for_date('2025-06-02', MAINTENANCE)) == 1

    def test_update_and_delete(self, app, room_id):
        window_id = create_window(room_id, MAINTENANCE, '2025-06-10', '2025-06-12')

        assert update_window(window_id, end_date='2025-06-15', reason='Plumbing')
        assert get_window_by_id(window_id)['end_date'] == '2025-06-15'

        assert delete_window(window_id) is True
        assert get_window_by_id(window_id) is None


class TestReleaseWindowRange:
    """Tests for releasing part of a window."""

    def test_release_whole_window(self, app, room_id):
        window_id = create_window(room_id, RESERVATION, '2025-06-10', '2025-06-12')

        result = release_window_range(window_id, '2025-06-10', '2025-06-12')
        assert result == {'action': 'deleted', 'window_ids': []}
        assert get_window_by_id(window_id) is None

    def test_release_start(self, app, room_id):
        window_id = create_window(room_id, RESERVATION, '2025-06-10', '2025-06-12')

        result = release_window_range(window_id, '2025-06-10', '2025-06-10')
        assert result['action'] == 'shrunk_start'
        assert get_window_by_id(window_id)['start_date'] == '2025-06-11'

    def test_release_end(self, app, room_id):
        window_id = create_window(room_id, RESERVATION, '2025-06-10', '2025-06-12')

        result = release_window_range(window_id, '2025-06-12', '2025-06-12')
        assert result['action'] == 'shrunk_end'
        assert get_window_by_id(window_id)['end_date'] == '2025-06-11'

    def test_release_middle_splits(self, app, room_id):
        window_id = create_window(room_id, MAINTENANCE, '2025-06-10', '2025-06-14',
                                  reason='Repainting')

        result = release_window_range(window_id, '2025-06-12', '2025-06-12')
        assert result['action'] == 'split'

        first, second = (get_window_by_id(i) for i in result['window_ids'])
        assert (first['start_date'], first['end_date']) == ('2025-06-10', '2025-06-11')
        assert (second['start_date'], second['end_date']) == ('2025-06-13', '2025-06-14')
        assert second['kind'] == MAINTENANCE
        assert second['reason'] == 'Repainting'

    def test_release_outside_window_rejected(self, app, room_id):
        window_id = create_window(room_id, RESERVATION, '2025-06-10', '2025-06-12')
        with pytest.raises(ValueError):
            release_window_range(window_id, '2025-06-11', '2025-06-13')

    def test_release_missing_window(self, app):
        with pytest.raises(ValueError):
            release_window_range(9999, '2025-06-11', '2025-06-11')


class TestResources:
    """Tests for resource creation and holds."""

    def test_create_resource_starts_unflagged(self, app):
        from models.resource import get_resource_by_id

        resource_id = create_resource('lawn', 'Pool Lawn', price_member='50000')
        resource = get_resource_by_id(resource_id)
        assert resource['is_reserved'] == 0
        assert resource['is_out_of_order'] == 0
        assert resource['price_member'] == '50000'

    def test_create_resource_invalid_type(self, app):
        with pytest.raises(ValueError):
            create_resource('cabana', 'Cabana 1')

    def test_filter_by_type(self, app):
        halls = get_all_resources(resource_type='hall')
        assert halls
        assert all(r['resource_type'] == 'hall' for r in halls)

    def test_hold_blocks_other_operator(self, app, room_id):
        hold_resource(room_id, 'alice', 15)

        with pytest.raises(ValueError):
            hold_resource(room_id, 'bob', 15)

    def test_hold_renewable_by_owner(self, app, room_id):
        first = hold_resource(room_id, 'alice', 15)
        second = hold_resource(room_id, 'alice', 30)
        assert second > first
