"""
Route tests.
Tests the club JSON API end to end through the Flask test client.
"""

import pytest

from models.resource_window import MAINTENANCE, create_window


class TestHealth:
    """Tests for the service health endpoint."""

    def test_health(self, client):
        response = client.get('/api/health')
        assert response.status_code == 200
        data = response.get_json()
        assert data['status'] == 'ok'
        assert data['scheduler_running'] is False


class TestResourceRoutes:
    """Tests for resource endpoints."""

    def test_list_resources(self, client):
        response = client.get('/club/api/resources?type=hall')
        assert response.status_code == 200
        data = response.get_json()
        assert data['success'] is True
        assert data['count'] == len(data['data'])
        assert all(r['resource_type'] == 'hall' for r in data['data'])

    def test_invalid_type(self, client):
        response = client.get('/club/api/resources?type=boat')
        assert response.status_code == 400

    def test_create_resource(self, client):
        response = client.post('/club/api/resources', json={
            'resource_type': 'room', 'name': '401', 'price_member': '9000'
        })
        assert response.status_code == 201
        assert response.get_json()['data']['name'] == '401'

    def test_create_resource_requires_body(self, client):
        response = client.post('/club/api/resources', json={})
        assert response.status_code == 400

    def test_resource_not_found(self, client):
        response = client.get('/club/api/resources/9999')
        assert response.status_code == 404

    def test_hold(self, client, room_id):
        response = client.post(f'/club/api/resources/{room_id}/hold', json={'held_by': 'alice'})
        assert response.status_code == 200

        response = client.post(f'/club/api/resources/{room_id}/hold', json={'held_by': 'bob'})
        assert response.status_code == 409


class TestWindowRoutes:
    """Tests for window endpoints."""

    def test_create_and_list(self, client, room_id):
        response = client.post(f'/club/api/resources/{room_id}/windows', json={
            'kind': 'MAINTENANCE', 'start_date': '2025-06-10', 'end_date': '2025-06-12'
        })
        assert response.status_code == 201
        window_id = response.get_json()['data']['window_id']

        response = client.get(f'/club/api/resources/{room_id}/windows?kind=MAINTENANCE')
        data = response.get_json()
        assert [w['id'] for w in data['data']] == [window_id]

    def test_inverted_window_rejected(self, client, room_id):
        response = client.post(f'/club/api/resources/{room_id}/windows', json={
            'kind': 'RESERVATION', 'start_date': '2025-06-12', 'end_date': '2025-06-10'
        })
        assert response.status_code == 400
        assert response.get_json()['success'] is False

    def test_release_and_delete(self, client, room_id):
        window_id = create_window(room_id, MAINTENANCE, '2025-06-10', '2025-06-14')

        response = client.post(f'/club/api/windows/{window_id}/release',
                               json={'start_date': '2025-06-12'})
        assert response.status_code == 200
        assert response.get_json()['data']['action'] == 'split'

        response = client.delete(f'/club/api/windows/{window_id}')
        assert response.status_code == 200

        response = client.delete(f'/club/api/windows/{window_id}')
        assert response.status_code == 404


class TestAvailabilityRoutes:
    """Tests for availability endpoints."""

    def test_resource_availability(self, client, room_id):
        create_window(room_id, MAINTENANCE, '2025-06-10', '2025-06-12')

        response = client.get(
            f'/club/api/resources/{room_id}/availability?from=2025-06-09&to=2025-06-13'
        )
        assert response.status_code == 200
        statuses = [d['status'] for d in response.get_json()['data']]
        assert statuses == ['AVAILABLE', 'OUT_OF_ORDER', 'OUT_OF_ORDER', 'OUT_OF_ORDER', 'AVAILABLE']

    @pytest.mark.parametrize('query', [
        '',
        '?from=2025-06-09',
        '?from=2025-06-13&to=2025-06-09',
        '?from=June&to=2025-06-09',
        '?from=2025-01-01&to=2027-01-01',
    ])
    def test_invalid_horizon(self, client, room_id, query):
        response = client.get(f'/club/api/resources/{room_id}/availability{query}')
        assert response.status_code == 400

    def test_unknown_resource(self, client):
        response = client.get('/club/api/resources/9999/availability?from=2025-06-09&to=2025-06-13')
        assert response.status_code == 404

    def test_store_unavailable(self, client, room_id, monkeypatch):
        from utils.errors import StoreUnavailableError

        def broken(*args, **kwargs):
            raise StoreUnavailableError('disk I/O error')

        monkeypatch.setattr('blueprints.club.routes.availability.project', broken)

        response = client.get(f'/club/api/resources/{room_id}/availability?from=2025-06-09&to=2025-06-13')
        assert response.status_code == 503

    def test_hall_slots(self, client, hall_id):
        response = client.get(f'/club/api/resources/{hall_id}/slots?from=2025-06-10&to=2025-06-11')
        assert response.status_code == 200
        assert len(response.get_json()['data']) == 2

    def test_availability_map(self, client, room_id):
        response = client.get('/club/api/availability?from=2025-06-10&to=2025-06-11&type=room')
        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['dates'] == ['2025-06-10', '2025-06-11']
        assert str(room_id) in data['availability']


class TestBookingRoutes:
    """Tests for booking and accounting endpoints."""

    def test_booking_lifecycle(self, client, hall_id):
        response = client.post('/club/api/bookings', json={
            'resource_id': hall_id,
            'booking_date': '2025-06-10',
            'time_slot': 'EVENING',
            'total_price': '10000',
            'payment_status': 'HALF_PAID',
            'paid_amount': '4000',
        })
        assert response.status_code == 201
        booking = response.get_json()['data']
        assert booking['pending_amount'] == '6000'

        booking_id = booking['booking_id']
        response = client.post(f'/club/api/bookings/{booking_id}/payment',
                               json={'payment_status': 'PAID'})
        assert response.status_code == 200
        assert response.get_json()['data']['owed'] == '0'

        response = client.post(f'/club/api/bookings/{booking_id}/cancel')
        assert response.status_code == 200

        response = client.post(f'/club/api/bookings/{booking_id}/cancel')
        assert response.status_code == 400

        response = client.get(f'/club/api/bookings/{booking_id}')
        assert response.get_json()['data']['is_cancelled'] == 1

    def test_booking_conflict(self, client, hall_id):
        payload = {'resource_id': hall_id, 'booking_date': '2025-06-10'}
        assert client.post('/club/api/bookings', json=payload).status_code == 201
        assert client.post('/club/api/bookings', json=payload).status_code == 400

    def test_booking_unknown_resource(self, client):
        response = client.post('/club/api/bookings', json={
            'resource_id': 9999, 'booking_date': '2025-06-10'
        })
        assert response.status_code == 404

    def test_booking_not_found(self, client):
        assert client.get('/club/api/bookings/9999').status_code == 404

    def test_accounting_preview(self, client):
        response = client.post('/club/api/accounting/preview', json={
            'payment_status': 'HALF_PAID', 'total_price': '10000', 'paid_amount': '4000'
        })
        assert response.status_code == 200
        assert response.get_json()['data'] == {
            'paid': '4000', 'owed': '6000', 'pending_amount': '6000'
        }

    def test_accounting_preview_invalid(self, client):
        response = client.post('/club/api/accounting/preview', json={
            'payment_status': 'HALF_PAID', 'total_price': '100', 'paid_amount': '500'
        })
        assert response.status_code == 400


class TestSchedulerRoutes:
    """Tests for scheduler status."""

    def test_status(self, client):
        response = client.get('/club/api/scheduler/status')
        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['running'] is False
        assert set(data['jobs']) == {'reservation_flags', 'maintenance_flags', 'hold_expiry'}
