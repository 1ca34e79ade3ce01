import pytest
import requests


class FakeResponse:
    def __init__(self, payload=None, status=200):
        self.payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        return self.payload


class FakeSession:
    """Responde según la URL; lo que no está registrado devuelve 404."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append(url)
        hit = self.routes.get(url)
        if isinstance(hit, Exception):
            raise hit
        if isinstance(hit, list):
            hit = hit.pop(0)
            if isinstance(hit, Exception):
                raise hit
        if hit is None:
            return FakeResponse(status=404)
        return FakeResponse(hit)


@pytest.fixture
def fake_session():
    return FakeSession()


GARCHOMP_API = {
    "id": 445,
    "name": "garchomp",
    "types": [
        {"slot": 2, "type": {"name": "ground"}},
        {"slot": 1, "type": {"name": "dragon"}},
    ],
    "abilities": [
        {"ability": {"name": "sand-veil"}, "is_hidden": False},
        {"ability": {"name": "rough-skin"}, "is_hidden": True},
    ],
    "stats": [
        {"stat": {"name": "hp"}, "base_stat": 108},
        {"stat": {"name": "attack"}, "base_stat": 130},
        {"stat": {"name": "defense"}, "base_stat": 95},
        {"stat": {"name": "special-attack"}, "base_stat": 80},
        {"stat": {"name": "special-defense"}, "base_stat": 85},
        {"stat": {"name": "speed"}, "base_stat": 102},
    ],
    "moves": [
        {"move": {"name": "earthquake"}},
        {"move": {"name": "dragon-claw"}},
        {"move": {"name": "fire-fang"}},
        {"move": {"name": "mud-slap"}},
    ],
    "species": {"url": "https://pokeapi.co/api/v2/pokemon-species/445/"},
}


@pytest.fixture
def garchomp_api():
    return dict(GARCHOMP_API)
