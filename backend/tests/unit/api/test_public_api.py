"""
Unit Tests for the public endpoints: event catalog, contact form, health
"""
import pytest
from httpx import AsyncClient

from velonix.core.config import settings


class TestEvents:

    @pytest.mark.asyncio
    async def test_catalog(self, client: AsyncClient):
        response = await client.get('/api/events')

        assert response.status_code == 200
        data = response.json()
        assert len(data['technical']) == 6
        assert len(data['nonTechnical']) == 7
        assert data['registrationFee'] == settings.REGISTRATION_FEE
        assert data['upiId'] == settings.PAYMENT_UPI_ID
        assert {e['category'] for e in data['technical']} == {'technical'}
        assert 'Dance' in [e['name'] for e in data['nonTechnical']]


class TestContact:

    @pytest.mark.asyncio
    async def test_always_succeeds(self, client: AsyncClient, dispatcher):
        response = await client.post('/api/contact', json={
            'name': 'Ravi',
            'email': 'ravi@example.com',
            'message': 'Is there a team registration?',
        })

        assert response.status_code == 200
        assert response.json() == {'success': True}
        assert dispatcher.pending == 0

    @pytest.mark.asyncio
    async def test_empty_body_succeeds(self, client: AsyncClient):
        response = await client.post('/api/contact', json={})

        assert response.status_code == 200
        assert response.json() == {'success': True}

    @pytest.mark.asyncio
    async def test_forwarded_when_smtp_configured(self, client: AsyncClient, dispatcher, with_email):
        await client.post('/api/contact', json={'name': 'Ravi', 'email': 'ravi@example.com', 'message': 'Hello'})

        assert dispatcher.pending == 1
        await dispatcher.drain()
        with_email.send_contact_message.assert_awaited_once_with('Ravi', 'ravi@example.com', 'Hello')


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get('/health')

        assert response.status_code == 200
        assert response.json()['status'] == 'healthy'

    @pytest.mark.asyncio
    async def test_request_id_and_security_headers(self, client: AsyncClient):
        response = await client.get('/api/events', headers={'X-Request-ID': 'req-123'})

        assert response.headers['X-Request-ID'] == 'req-123'
        assert response.headers['X-Content-Type-Options'] == 'nosniff'
        assert response.headers['X-Frame-Options'] == 'DENY'
