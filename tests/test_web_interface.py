"""Tests for the Flask web interface."""

import pytest
from prometheus_client import REGISTRY

from error_handling import ValidationError
from recipe_web_interface import RecipeWebInterface


class StubRecommendations:

    def __init__(self, html='<p><b>cookbooks</b><br /><a href="https://example.com">x</a></p>'):
        self.html = html

    def load_html(self):
        return self.html


@pytest.fixture
def interface(catalog):
    return RecipeWebInterface({'secret_key': 'test'}, catalog=catalog, recommendations=StubRecommendations())


@pytest.fixture
def client(interface):
    interface.app.testing = True
    return interface.app.test_client()


def test_index_lists_recipes(client):
    response = client.get('/')
    assert response.status_code == 200
    html = response.get_data(as_text=True)
    assert '<a href="/recipes/kimchi-stew">kimchi stew</a> / ' in html
    assert '<a href="/recipes/checca" style="font-style: italic">checca</a>' in html


def test_recipe_page_default_scale(client):
    html = client.get('/recipes/kimchi-stew').get_data(as_text=True)
    assert '<li>300\u202fg pork belly</li>' in html
    assert '<li>1-2 spring onions</li>' in html
    assert '<li>sesame seeds</li>' in html
    assert '<h2>top with</h2>' in html
    assert '<span>Serve with {ingredient.9}.</span>' in html


def test_recipe_page_scaled(client):
    html = client.get('/recipes/kimchi-stew?scale=2').get_data(as_text=True)
    assert '<span class="label">2</span>' in html
    assert 'href="/recipes/kimchi-stew?scale=1.5"' in html
    assert 'href="/recipes/kimchi-stew?scale=2.5"' in html
    assert '<a href="/recipes/kimchi-stew?scale=2" class="active">2×</a>' in html
    assert '<li>600\u202fg pork belly</li>' in html
    assert '<li>1\u202fl stock</li>' in html
    assert '<li>2\u202ftsp sesame oil</li>' in html
    assert '<span>Fry 600\u202fg with 600\u202fg.</span>' in html
    assert '<strong>20 minutes</strong>' in html


def test_recipe_without_toppings(client):
    html = client.get('/recipes/checca').get_data(as_text=True)
    assert 'top with' not in html
    # placeholder mode leaves prose quantities alone
    assert '<span>Cook 250 g spaghetti for 10 minutes.</span>' in html


def test_free_text_mode(catalog):
    interface = RecipeWebInterface({'instruction_mode': 'free_text'}, catalog=catalog,
                                   recommendations=StubRecommendations())
    html = interface.app.test_client().get('/recipes/checca?scale=4').get_data(as_text=True)
    assert '<span>Cook 1 kg spaghetti for 10 minutes.</span>' in html


def test_unknown_instruction_mode(catalog):
    with pytest.raises(ValidationError):
        RecipeWebInterface({'instruction_mode': 'guess'}, catalog=catalog,
                           recommendations=StubRecommendations())


def test_decrement_stops_at_half(client):
    html = client.get('/recipes/checca?scale=0.5').get_data(as_text=True)
    assert 'class="decrement" href="/recipes/checca?scale=0.5"' in html
    assert 'href="/recipes/checca?scale=1"' in html


@pytest.mark.parametrize("scale", ["0", "-2", "abc", "inf"])
def test_invalid_scale_page(client, scale):
    response = client.get(f'/recipes/checca?scale={scale}')
    assert response.status_code == 400


def test_unknown_recipe_page(client):
    response = client.get('/recipes/lasagne')
    assert response.status_code == 404
    assert 'Recipe not found: lasagne' in response.get_data(as_text=True)


def test_recommendations_page(client):
    html = client.get('/recommendations').get_data(as_text=True)
    assert '<p><b>cookbooks</b><br /><a href="https://example.com">x</a></p>' in html


def test_api_list_recipes(client):
    data = client.get('/api/recipes').get_json()
    assert data == {
        'recipes': [
            {'slug': 'kimchi-stew', 'name': 'kimchi stew', 'title': 'kimchi stew'},
            {'slug': 'checca', 'name': 'checca', 'title': 'pasta alla checca'},
        ]
    }


def test_api_get_recipe(client):
    data = client.get('/api/recipes/checca').get_json()
    assert data['title'] == 'pasta alla checca'
    assert data['ingredients'] == [{'item': 'spaghetti', 'amount': 250, 'unit': 'g'}]


def test_api_unknown_recipe(client):
    response = client.get('/api/recipes/lasagne')
    assert response.status_code == 404
    assert response.get_json()['error']['code'] == 'RecipeNotFoundError'


def test_api_scale_get(client):
    data = client.get('/api/scale/kimchi-stew?scale_factor=0.5').get_json()
    assert data['scaling_factor'] == 0.5
    assert data['scale_label'] == '0.5'
    assert data['ingredients'][0] == {
        'item': 'pork belly', 'amount': '150', 'unit': 'g', 'display': '150\u202fg'
    }
    assert data['toppings'][0]['display'] == '0.5\u202ftsp'


def test_api_scale_post_free_text(client):
    response = client.post('/api/scale/checca', json={'scale_factor': 4, 'instruction_mode': 'free_text'})
    data = response.get_json()
    assert response.status_code == 200
    assert data['scale_label'] == '4'
    assert data['instruction_mode'] == 'free_text'
    assert data['ingredients'][0]['display'] == '1\u202fkg'
    assert data['instructions'] == ['Cook 1 kg spaghetti for 10 minutes.']


def test_api_scale_invalid_factor(client):
    response = client.get('/api/scale/checca?scale_factor=-1')
    assert response.status_code == 400
    assert response.get_json()['error']['code'] == 'InvalidScaleError'


def test_api_scale_rejects_non_object_body(client):
    response = client.post('/api/scale/checca', json=[1, 2])
    assert response.status_code == 400


def test_api_unknown_route(client):
    response = client.get('/api/nothing-here')
    assert response.status_code == 404
    assert response.get_json()['error']['code'] == 'Not Found'


def test_health(client):
    assert client.get('/health').get_json() == {'status': 'ok', 'recipes': 2}


def test_metrics(client):
    client.get('/recipes/checca?scale=3')
    response = client.get('/metrics')
    assert response.status_code == 200
    assert 'recipe_scale_requests_total{recipe="checca",scale="3"}' in response.get_data(as_text=True)


def test_metrics_group_off_preset_scales(client):
    labels = {'recipe': 'checca', 'scale': 'custom'}
    before = REGISTRY.get_sample_value('recipe_scale_requests_total', labels) or 0
    for scale in ("1.5", "2.5", "7", "12.5"):
        client.get(f'/recipes/checca?scale={scale}')
    client.post('/api/scale/checca', json={'scale_factor': 4.5})
    body = client.get('/metrics').get_data(as_text=True)
    assert REGISTRY.get_sample_value('recipe_scale_requests_total', labels) == before + 5
    assert 'scale="1.5"' not in body
    assert 'scale="12.5"' not in body


def test_overflowing_scale_renders(client):
    response = client.get('/recipes/kimchi-stew?scale=1e308')
    assert response.status_code == 200
    assert '<li>inf\u202fkg pork belly</li>' in response.get_data(as_text=True)

    data = client.get('/api/scale/kimchi-stew?scale_factor=1e308').get_json()
    assert data['ingredients'][0]['display'] == 'inf\u202fkg'


def test_loads_bundled_data(data_dir):
    interface = RecipeWebInterface({'data_path': str(data_dir / 'recipes.json')},
                                   recommendations=StubRecommendations())
    assert len(interface.catalog) == 7
    assert 'ragu' in interface.catalog
