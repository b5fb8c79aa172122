"""
Tests for the Google Places client and place normalization.
"""
import requests

from meetup.services.places_service import (
    places_service,
    PlacesService,
    normalize_place,
    cuisine_from_types,
    DEFAULT_PRICE_LEVEL,
    DEFAULT_RATING,
)
from tests.conftest import FakeResponse

SEARCH_URL = PlacesService.NEARBY_SEARCH_URL
DETAILS_URL = PlacesService.DETAILS_URL
DISTANCE_URL = PlacesService.DISTANCE_MATRIX_URL


def place(place_id='abc', **overrides):
    data = {
        'place_id': place_id,
        'name': 'Alpha Bistro',
        'vicinity': '12 Main St',
        'types': ['italian_restaurant', 'restaurant', 'food'],
        'price_level': 3,
        'rating': 4.5,
        'geometry': {'location': {'lat': 40.761, 'lng': -111.89}},
        'photos': [{'photo_reference': 'ref-1', 'height': 100, 'width': 100}],
        'website': 'https://alpha.example.com',
        'url': 'https://maps.google.com/?cid=1',
    }
    data.update(overrides)
    return data


class TestNormalizePlace:

    def test_full_record(self):
        result = normalize_place(place(), photo_url_builder=lambda ref: f'photo/{ref}')

        assert result == {
            'id': 'abc',
            'ephemeral': False,
            'name': 'Alpha Bistro',
            'address': '12 Main St',
            'cuisine_type': 'Italian',
            'price_level': 3,
            'rating': 4.5,
            'lat': 40.761,
            'lng': -111.89,
            'photo_url': 'photo/ref-1',
            'maps_url': 'https://maps.google.com/?cid=1',
            'website_url': 'https://alpha.example.com',
        }

    def test_missing_optional_fields_are_defaulted(self):
        raw = {
            'place_id': 'abc',
            'name': 'Plain Diner',
            'vicinity': '1 Side St',
            'types': [],
            'geometry': {'location': {'lat': 1.0, 'lng': 2.0}},
        }

        result = normalize_place(raw)

        assert result['price_level'] == DEFAULT_PRICE_LEVEL == 2
        assert result['rating'] == DEFAULT_RATING
        assert result['cuisine_type'] == 'Restaurant'
        assert result['photo_url'] is None
        assert result['maps_url'] is None
        assert result['website_url'] is None

    def test_out_of_range_price_level_is_defaulted(self):
        assert normalize_place(place(price_level=0))['price_level'] == 2
        assert normalize_place(place(price_level=7))['price_level'] == 2

    def test_boolean_price_and_rating_are_defaulted(self):
        result = normalize_place(place(price_level=True, rating=True))

        assert result['price_level'] == DEFAULT_PRICE_LEVEL
        assert result['rating'] == DEFAULT_RATING

    def test_missing_geometry_is_dropped(self):
        assert normalize_place(place(geometry=None)) is None
        assert normalize_place(place(geometry={'location': {'lat': 1.0}})) is None
        assert normalize_place(place(geometry={'location': {'lat': 'x', 'lng': 2}})) is None

    def test_missing_id_gets_ephemeral_id(self):
        first = normalize_place(place(place_id=None))
        second = normalize_place(place(place_id=None))

        assert first['ephemeral'] is True
        assert first['id'].startswith('temp-')
        assert first['id'] != second['id']

    def test_cuisine_from_types(self):
        assert cuisine_from_types(['point_of_interest', 'thai_restaurant']) == 'Thai'
        assert cuisine_from_types(['ramen_bar']) == 'Ramen Bar'
        assert cuisine_from_types(None) == 'Restaurant'


class TestSearchRestaurants:

    def test_search_returns_places_and_passes_filters(self, app, fake_requests):
        fake_requests.responses[SEARCH_URL] = FakeResponse({'status': 'OK', 'results': [place()]})

        result = places_service.search_restaurants(40.76, -111.89, radius=2000, keyword='pasta',
                                                   min_price=1, max_price=3)

        assert result['success'] is True
        assert result['places'][0]['place_id'] == 'abc'
        _, params = fake_requests.calls[0]
        assert params['location'] == '40.76,-111.89'
        assert params['radius'] == '2000'
        assert params['keyword'] == 'pasta'
        assert params['minprice'] == '1'
        assert params['maxprice'] == '3'
        assert params['opennow'] == 'true'
        assert params['key'] == 'test-key'

    def test_search_results_are_cached(self, app, fake_requests):
        fake_requests.responses[SEARCH_URL] = FakeResponse({'status': 'OK', 'results': [place()]})

        places_service.search_restaurants(40.76, -111.89)
        second = places_service.search_restaurants(40.76, -111.89)

        assert len(fake_requests.calls) == 1
        assert second['places'][0]['place_id'] == 'abc'

    def test_different_query_misses_cache(self, app, fake_requests):
        fake_requests.responses[SEARCH_URL] = FakeResponse({'status': 'OK', 'results': []})

        places_service.search_restaurants(40.76, -111.89)
        places_service.search_restaurants(40.76, -111.89, open_now=False)

        assert len(fake_requests.calls) == 2

    def test_force_refresh_skips_cache(self, app, fake_requests):
        fake_requests.responses[SEARCH_URL] = FakeResponse({'status': 'OK', 'results': [place()]})

        places_service.search_restaurants(40.76, -111.89)
        places_service.search_restaurants(40.76, -111.89, force_refresh=True)

        assert len(fake_requests.calls) == 2

    def test_zero_results(self, app, fake_requests):
        fake_requests.responses[SEARCH_URL] = FakeResponse({'status': 'ZERO_RESULTS', 'results': []})

        result = places_service.search_restaurants(40.76, -111.89)

        assert result == {'success': True, 'places': [], 'error': None}

    def test_http_error_degrades_to_empty(self, app, fake_requests):
        fake_requests.responses[SEARCH_URL] = FakeResponse(status_code=500, text='boom')

        result = places_service.search_restaurants(40.76, -111.89)

        assert result['success'] is False
        assert result['places'] == []
        assert result['error'] == 'API error: 500'

    def test_timeout_degrades_to_empty(self, app, fake_requests):
        fake_requests.responses[SEARCH_URL] = requests.exceptions.Timeout()

        result = places_service.search_restaurants(40.76, -111.89)

        assert result['places'] == []
        assert result['error'] == 'Request timed out'

    def test_connection_error_degrades_to_empty(self, app, fake_requests):
        fake_requests.responses[SEARCH_URL] = requests.exceptions.ConnectionError('down')

        result = places_service.search_restaurants(40.76, -111.89)

        assert result['success'] is False
        assert result['places'] == []

    def test_invalid_json_degrades_to_empty(self, app, fake_requests):
        fake_requests.responses[SEARCH_URL] = FakeResponse(ValueError('not json'))

        result = places_service.search_restaurants(40.76, -111.89)

        assert result['places'] == []
        assert result['error'] == 'Invalid response'

    def test_denied_status_degrades_to_empty(self, app, fake_requests):
        fake_requests.responses[SEARCH_URL] = FakeResponse({
            'status': 'REQUEST_DENIED',
            'error_message': 'bad key',
            'results': [],
        })

        result = places_service.search_restaurants(40.76, -111.89)

        assert result['success'] is False
        assert result['error'] == 'API status: REQUEST_DENIED'

    def test_failed_search_is_not_cached(self, app, fake_requests):
        fake_requests.responses[SEARCH_URL] = FakeResponse(status_code=503)
        places_service.search_restaurants(40.76, -111.89)

        fake_requests.responses[SEARCH_URL] = FakeResponse({'status': 'OK', 'results': [place()]})
        result = places_service.search_restaurants(40.76, -111.89)

        assert result['places'][0]['place_id'] == 'abc'

    def test_not_configured(self, app, fake_requests):
        app.config['GOOGLE_PLACES_API_KEY'] = None

        result = places_service.search_restaurants(40.76, -111.89)

        assert result['success'] is False
        assert fake_requests.calls == []
        assert places_service.is_configured() is False


class TestPlaceDetails:

    def test_details_are_fetched_and_cached(self, app, fake_requests):
        details = place()
        del details['place_id']
        fake_requests.responses[DETAILS_URL] = FakeResponse({'status': 'OK', 'result': details})

        first = places_service.get_place_details('abc')
        second = places_service.get_place_details('abc')

        assert first['success'] is True
        assert first['place']['place_id'] == 'abc'
        assert second['place']['name'] == 'Alpha Bistro'
        assert len(fake_requests.calls) == 1

    def test_details_require_place_id(self, app, fake_requests):
        result = places_service.get_place_details('')

        assert result['success'] is False
        assert result['error'] == 'Place ID required'

    def test_details_not_found(self, app, fake_requests):
        fake_requests.responses[DETAILS_URL] = FakeResponse({'status': 'NOT_FOUND'})

        result = places_service.get_place_details('missing')

        assert result['success'] is False
        assert result['place'] is None


class TestWalkingDistance:

    def test_walking_distance(self, app, fake_requests):
        fake_requests.responses[DISTANCE_URL] = FakeResponse({
            'status': 'OK',
            'rows': [{'elements': [{
                'distance': {'text': '0.5 mi', 'value': 800},
                'duration': {'text': '10 mins', 'value': 600},
            }]}],
        })

        result = places_service.get_walking_distance(40.76, -111.89, 40.77, -111.88)
        places_service.get_walking_distance(40.76, -111.89, 40.77, -111.88)

        assert result['success'] is True
        assert result['distance']['duration']['value'] == 600
        assert fake_requests.calls[0][1]['mode'] == 'walking'
        assert len(fake_requests.calls) == 1

    def test_walking_distance_without_elements(self, app, fake_requests):
        fake_requests.responses[DISTANCE_URL] = FakeResponse({'status': 'OK', 'rows': []})

        result = places_service.get_walking_distance(40.76, -111.89, 40.77, -111.88)

        assert result['success'] is False
        assert result['distance'] is None

    def test_photo_url(self, app):
        url = places_service.photo_url('ref-1', max_width=200)
        assert url.startswith(PlacesService.PHOTO_URL)
        assert 'maxwidth=200' in url
        assert 'photoreference=ref-1' in url
