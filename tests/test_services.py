# tests/test_services.py
from datetime import datetime
from types import SimpleNamespace

import pytest
import requests

from cravings import claude_service, email_service, spoonacular_service
from cravings.claude_service import GroceryListOrganizerError, parse_json_array
from cravings.dietary_filter import DietaryProfile
from cravings.email_service import EmailDeliveryError, EmailNotConfiguredError
from cravings.scheduler import to_local, to_utc_naive
from cravings.spoonacular_service import RecipeProviderError


class FakeResponse:

    def __init__(self, payload=None, status_code=200, text=""):
        self._payload = payload
        self.status_code = status_code
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


# --- Spoonacular ---


@pytest.fixture
def spoonacular_calls(monkeypatch):
    calls = []

    def install(response):
        def fake_get(url, params=None, headers=None, timeout=None):
            calls.append({"url": url, "params": params, "headers": headers})
            if isinstance(response, Exception):
                raise response
            return response

        monkeypatch.setattr(spoonacular_service.requests, "get", fake_get)
        return calls

    return install


def test_build_filter_params_joins_profile_lists():
    profile = DietaryProfile(
        dietary_preferences=["vegan", "gluten free"],
        allergies=["peanut"],
        cuisines=["Thai", "Indian"],
    )
    assert spoonacular_service.build_filter_params(profile) == {
        "diet": "vegan,gluten free",
        "intolerances": "peanut",
        "cuisine": "Thai,Indian",
    }
    assert spoonacular_service.build_filter_params(None) == {}
    assert spoonacular_service.build_filter_params(DietaryProfile()) == {}


def test_search_recipes_requests_full_information(spoonacular_calls):
    calls = spoonacular_calls(FakeResponse({"results": [{"id": 1}, {"id": 2}]}))
    profile = DietaryProfile(dietary_preferences=["vegan"])

    results = spoonacular_service.search_recipes("curry", profile, number=50)

    assert results == [{"id": 1}, {"id": 2}]
    call = calls[0]
    assert call["url"].endswith("/recipes/complexSearch")
    assert call["headers"] == {"x-api-key": "test-spoonacular-key"}
    assert call["params"]["query"] == "curry"
    assert call["params"]["number"] == 50
    assert call["params"]["addRecipeInformation"] == "true"
    assert call["params"]["fillIngredients"] == "true"
    assert call["params"]["diet"] == "vegan"


def test_random_recipes_sends_lowercase_tags(spoonacular_calls):
    calls = spoonacular_calls(FakeResponse({"recipes": [{"id": 3}]}))
    profile = DietaryProfile(dietary_preferences=["vegetarian"], cuisines=["Italian"])

    assert spoonacular_service.get_random_recipes(50, profile) == [{"id": 3}]
    assert calls[0]["url"].endswith("/recipes/random")
    assert calls[0]["params"] == {"number": 50, "include-tags": "vegetarian,italian"}


def test_http_error_keeps_upstream_status(spoonacular_calls):
    spoonacular_calls(FakeResponse({"message": "quota"}, status_code=402))
    with pytest.raises(RecipeProviderError) as exc_info:
        spoonacular_service.get_recipe_details(42)
    assert exc_info.value.status_code == 402


def test_network_failure_and_bad_json_raise_provider_error(spoonacular_calls):
    spoonacular_calls(requests.exceptions.ConnectionError("down"))
    with pytest.raises(RecipeProviderError) as exc_info:
        spoonacular_service.search_recipes("soup")
    assert exc_info.value.status_code is None


def test_unexpected_payload_shape_raises(spoonacular_calls):
    spoonacular_calls(FakeResponse({"unexpected": True}))
    with pytest.raises(RecipeProviderError):
        spoonacular_service.get_random_recipes()


def test_ingredient_lines_prefer_original_text():
    r = {
        "extendedIngredients": [
            {"name": "flour", "original": "2 cups flour"},
            {"name": "salt"},
            {"amount": 1},
        ]
    }
    assert spoonacular_service.ingredient_lines(r) == ["2 cups flour", "salt"]
    assert spoonacular_service.ingredient_lines({}) == []


# --- Claude ---


def test_parse_json_array_tolerates_fences_and_prose():
    assert parse_json_array('[{"name": "milk"}]') == [{"name": "milk"}]
    assert parse_json_array('```json\n[{"name": "eggs"}]\n```') == [{"name": "eggs"}]
    assert parse_json_array('Here you go: [{"name": "rice"}] Enjoy!') == [{"name": "rice"}]
    assert parse_json_array('{"items": [{"name": "oil"}]}') == [{"name": "oil"}]


def test_parse_json_array_rejects_non_arrays():
    with pytest.raises(GroceryListOrganizerError):
        parse_json_array("no json here")
    with pytest.raises(GroceryListOrganizerError):
        parse_json_array('{"name": "milk"}')


def test_process_inventory_ingredients_normalizes_records(monkeypatch):
    reply = """[
        {"name": " Milk ", "quantity": "2", "unit": "cups", "category": "Dairy"},
        {"name": "Salt", "quantity": "a pinch", "unit": "", "category": null},
        {"name": "", "quantity": 1},
        "garbage"
    ]"""
    monkeypatch.setattr(claude_service, "_complete", lambda system, prompt: reply)

    items = claude_service.process_inventory_ingredients(["2 cups milk", "salt"])

    assert items == [
        {"name": "Milk", "quantity": 2.0, "unit": "cups", "category": "Dairy"},
        {"name": "Salt", "quantity": None, "unit": None, "category": None},
    ]


def test_organize_grocery_list_rejects_empty_reply(monkeypatch):
    monkeypatch.setattr(claude_service, "_complete", lambda system, prompt: "")
    with pytest.raises(GroceryListOrganizerError):
        claude_service.organize_grocery_list(["1 onion"])


def test_complete_wraps_client_errors(monkeypatch):
    def boom(**kwargs):
        raise RuntimeError("overloaded")

    fake_client = SimpleNamespace(messages=SimpleNamespace(create=boom))
    monkeypatch.setattr(claude_service, "client", fake_client)
    with pytest.raises(GroceryListOrganizerError):
        claude_service.organize_grocery_list(["1 onion"])


def test_complete_returns_first_text_block(monkeypatch):
    captured = {}

    def create(**kwargs):
        captured.update(kwargs)
        return SimpleNamespace(
            content=[SimpleNamespace(type="thinking"), SimpleNamespace(text="  Produce:\n- onion  ")],
            usage=SimpleNamespace(input_tokens=10, output_tokens=5),
        )

    monkeypatch.setattr(claude_service, "client", SimpleNamespace(messages=SimpleNamespace(create=create)))

    assert claude_service.organize_grocery_list(["1 onion"]) == "Produce:\n- onion"
    assert "1 onion" in captured["messages"][0]["content"]
    assert captured["system"] == claude_service.GROCERY_SYSTEM_PROMPT


# --- EmailJS ---


def test_send_email_posts_template_params(monkeypatch):
    posted = {}

    def fake_post(url, json=None, timeout=None):
        posted.update(url=url, json=json)
        return FakeResponse(status_code=200)

    monkeypatch.setattr(email_service.requests, "post", fake_post)
    email_service.send_grocery_list_email("jane@example.com", "Produce:\n- kale", "Dinner")

    assert posted["url"] == email_service.EMAILJS_SEND_URL
    assert posted["json"]["service_id"] == "service_test"
    assert posted["json"]["accessToken"] == "private_test"
    assert posted["json"]["template_params"] == {
        "to_email": "jane@example.com",
        "grocery_list": "Produce:\n- kale",
        "recipe_name": "Dinner",
    }


def test_send_email_maps_rejection_to_delivery_error(monkeypatch):
    monkeypatch.setattr(
        email_service.requests, "post",
        lambda url, json=None, timeout=None: FakeResponse(status_code=400, text="bad template"),
    )
    with pytest.raises(EmailDeliveryError):
        email_service.send_grocery_list_email("jane@example.com", "x", "y")


def test_send_email_requires_configuration(monkeypatch):
    monkeypatch.setenv("EMAILJS_PRIVATE_KEY", "")
    assert not email_service.is_configured()
    with pytest.raises(EmailNotConfiguredError):
        email_service.send_grocery_list_email("jane@example.com", "x", "y")


# --- Timezones ---


def test_local_times_convert_to_naive_utc_across_dst():
    winter = to_utc_naive(datetime(2025, 1, 15, 12, 0), "America/New_York")
    summer = to_utc_naive(datetime(2025, 7, 15, 12, 0), "America/New_York")
    assert winter == datetime(2025, 1, 15, 17, 0)
    assert summer == datetime(2025, 7, 15, 16, 0)
    assert winter.tzinfo is None


def test_to_local_round_trips_wall_clock():
    local = to_local(datetime(2025, 7, 15, 16, 0), "America/New_York")
    assert (local.hour, local.minute) == (12, 0)
