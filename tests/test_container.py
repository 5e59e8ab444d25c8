"""Tests for container wiring."""

from platemate.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.settings is settings
    assert container.dish_service is not None
    assert container.card_service.dish_service is container.dish_service
    assert container.discovery.debounce_seconds == settings.search_debounce_seconds
    assert container.discovery.window_days == settings.throwback_window_days
