"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import FastAPI, HTTPException, Query, Request, status

from platemate.api.models import (
    DiscoveryUpdate,
    DishCreate,
    DishUpdate,
    ThemeUpdate,
    decode_image,
    encode_image,
)
from platemate.app_logging import configure_logging
from platemate.containers import AppContainer
from platemate.domain.cards import PlateCard, PlateCardTheme, TextCustomization
from platemate.domain.dishes import (
    DishDraft,
    DishEdit,
    DishRecord,
    DishSnapshot,
    QueryParameters,
    RestaurantRecord,
    SortOption,
)
from platemate.services.query import (
    compute_memory_lane,
    compute_view,
    highly_rated,
    pick_random,
)


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    settings = container.settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            app.state.container.dish_service.refresh()
        except Exception:
            logger.exception("Failed to load dishes on startup")
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/dishes")
    async def list_dishes(
        request: Request,
        search: str = "",
        sort: SortOption = SortOption.NEWEST,
        min_rating: float = 0.0,
    ) -> dict[str, object]:
        """Return the filtered and sorted dish list with throwbacks."""
        state_container: AppContainer = request.app.state.container
        snapshot = state_container.dish_service.refresh()
        params = QueryParameters(search_text=search, min_rating=min_rating, sort=sort)
        view = compute_view(
            snapshot, params, window_days=settings.throwback_window_days
        )
        return {
            **_serialize_params(params),
            "dishes": [_serialize_dish(dish, snapshot) for dish in view.dishes],
            "throwbacks": [_serialize_dish(dish, snapshot) for dish in view.throwbacks],
        }

    @app.post("/dishes", status_code=status.HTTP_201_CREATED)
    async def create_dish(payload: DishCreate, request: Request) -> dict[str, object]:
        """Log a new dish."""
        state_container: AppContainer = request.app.state.container
        dish = state_container.dish_service.log_dish(
            DishDraft(
                name=payload.name,
                restaurant_name=payload.restaurant_name,
                notes=payload.notes,
                image_data=(
                    decode_image(payload.image_base64)
                    if payload.image_base64
                    else None
                ),
                taste_rating=payload.taste_rating,
                presentation_rating=payload.presentation_rating,
                value_rating=payload.value_rating,
            )
        )
        if dish is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Dish could not be saved",
            )
        return _serialize_dish(dish, state_container.dish_service.snapshot)

    @app.get("/dishes/recent")
    async def recent_dishes(request: Request) -> dict[str, object]:
        """Return the most recently logged dishes."""
        state_container: AppContainer = request.app.state.container
        service = state_container.dish_service
        service.refresh()
        dishes = service.recent_dishes(settings.recent_limit)
        return {"dishes": [_serialize_dish(dish, service.snapshot) for dish in dishes]}

    @app.get("/dishes/highlights")
    async def highlighted_dishes(
        request: Request, min_rating: float = 4.0, limit: int = 5
    ) -> dict[str, object]:
        """Return highly rated dishes for featuring."""
        state_container: AppContainer = request.app.state.container
        snapshot = state_container.dish_service.refresh()
        dishes = highly_rated(snapshot.dishes, min_rating=min_rating, limit=limit)
        return {"dishes": [_serialize_dish(dish, snapshot) for dish in dishes]}

    @app.get("/dishes/{dish_id}")
    async def get_dish(dish_id: UUID, request: Request) -> dict[str, object]:
        """Return a single dish."""
        state_container: AppContainer = request.app.state.container
        snapshot = state_container.dish_service.refresh()
        dish = state_container.dish_service.get_dish(dish_id)
        if dish is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return _serialize_dish(dish, snapshot)

    @app.patch("/dishes/{dish_id}")
    async def update_dish(
        dish_id: UUID, payload: DishUpdate, request: Request
    ) -> dict[str, object]:
        """Edit a dish's name, notes and ratings."""
        state_container: AppContainer = request.app.state.container
        service = state_container.dish_service
        service.refresh()
        existing = service.get_dish(dish_id)
        if existing is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        provided = payload.model_fields_set
        dish = service.update_dish(
            dish_id,
            DishEdit(
                name=existing.name if payload.name is None else payload.name,
                notes=payload.notes if "notes" in provided else existing.notes,
                taste_rating=payload.taste_rating,
                presentation_rating=payload.presentation_rating,
                value_rating=payload.value_rating,
            ),
        )
        if dish is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Dish could not be updated",
            )
        return _serialize_dish(dish, service.snapshot)

    @app.delete("/dishes/{dish_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_dish(dish_id: UUID, request: Request) -> None:
        """Delete a dish."""
        state_container: AppContainer = request.app.state.container
        service = state_container.dish_service
        service.refresh()
        if service.get_dish(dish_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        if not service.delete_dish(dish_id):
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Dish could not be deleted",
            )

    @app.get("/dishes/{dish_id}/card")
    async def dish_card(
        dish_id: UUID,
        request: Request,
        theme: PlateCardTheme | None = None,
        font_scale: float = Query(default=1.0, ge=0.5, le=2.0),
        font_weight: int = Query(default=4, ge=1, le=9),
    ) -> dict[str, object]:
        """Return the data needed to render a plate card."""
        state_container: AppContainer = request.app.state.container
        state_container.dish_service.refresh()
        text = TextCustomization(font_scale=font_scale, font_weight=font_weight)
        card = state_container.card_service.build_card(dish_id, theme, text)
        if card is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return _serialize_card(card)

    @app.post("/dishes/{dish_id}/share")
    async def share_dish(dish_id: UUID, request: Request) -> dict[str, object]:
        """Record that a dish card was shared."""
        state_container: AppContainer = request.app.state.container
        state_container.dish_service.refresh()
        if state_container.dish_service.get_dish(dish_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {"total_shared": state_container.card_service.track_share(dish_id)}

    @app.get("/restaurants/suggestions")
    async def restaurant_suggestions(
        request: Request, query: str = ""
    ) -> dict[str, object]:
        """Autocomplete restaurant names."""
        state_container: AppContainer = request.app.state.container
        names = state_container.dish_service.restaurant_suggestions(
            query, settings.suggestion_limit
        )
        return {"suggestions": names}

    @app.get("/restaurants/favorites")
    async def favorite_restaurants(request: Request) -> dict[str, object]:
        """Return the most visited restaurants."""
        state_container: AppContainer = request.app.state.container
        restaurants = state_container.dish_service.favorite_restaurants(
            settings.favorites_limit
        )
        return {"restaurants": [_serialize_restaurant(r) for r in restaurants]}

    @app.put("/discovery", status_code=status.HTTP_202_ACCEPTED)
    async def update_discovery(
        payload: DiscoveryUpdate, request: Request
    ) -> dict[str, object]:
        """Change the live query; the view recomputes once input settles."""
        state_container: AppContainer = request.app.state.container
        discovery = state_container.discovery
        discovery.update(**payload.model_dump(exclude_none=True))
        return {**_serialize_params(discovery.params), "pending": discovery.pending}

    @app.get("/discovery")
    async def get_discovery(request: Request) -> dict[str, object]:
        """Return the live query and its last settled view."""
        state_container: AppContainer = request.app.state.container
        discovery = state_container.discovery
        snapshot = state_container.dish_service.refresh()
        view = discovery.view
        if view is None or not discovery.pending:
            view = discovery.recompute()
        return {
            **_serialize_params(discovery.params),
            "pending": discovery.pending,
            "dishes": [_serialize_dish(dish, snapshot) for dish in view.dishes],
            "throwbacks": [_serialize_dish(dish, snapshot) for dish in view.throwbacks],
        }

    @app.get("/memories")
    async def memories(request: Request) -> dict[str, object]:
        """Return the month timeline and throwbacks."""
        state_container: AppContainer = request.app.state.container
        snapshot = state_container.dish_service.refresh()
        lane = compute_memory_lane(
            snapshot, window_days=settings.throwback_window_days
        )
        timeline = lane.timeline
        return {
            "timeline": [
                {
                    "month": key.isoformat(),
                    "label": timeline.label(key),
                    "dishes": [
                        _serialize_dish(dish, snapshot) for dish in timeline.groups[key]
                    ],
                }
                for key in timeline.keys
            ],
            "throwbacks": [_serialize_dish(dish, snapshot) for dish in lane.throwbacks],
        }

    @app.get("/memories/roulette")
    async def taste_roulette(request: Request) -> dict[str, object]:
        """Return a random dish to revisit."""
        state_container: AppContainer = request.app.state.container
        snapshot = state_container.dish_service.refresh()
        dish = pick_random(snapshot.dishes)
        if dish is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return _serialize_dish(dish, snapshot)

    @app.get("/preferences/theme")
    async def get_theme(request: Request) -> dict[str, str]:
        """Return the preferred card theme."""
        state_container: AppContainer = request.app.state.container
        return {"theme": state_container.card_service.preferred_theme().value}

    @app.put("/preferences/theme")
    async def put_theme(payload: ThemeUpdate, request: Request) -> dict[str, str]:
        """Save the preferred card theme."""
        state_container: AppContainer = request.app.state.container
        state_container.card_service.save_preferred_theme(payload.theme)
        return {"theme": payload.theme.value}

    @app.get("/stats/sharing")
    async def sharing_stats(request: Request) -> dict[str, object]:
        """Return share totals and conversion rate."""
        state_container: AppContainer = request.app.state.container
        state_container.dish_service.refresh()
        card_service = state_container.card_service
        return {
            "total_shared": card_service.shared_count(),
            "conversion_rate": card_service.share_conversion_rate(),
        }

    return app


def _serialize_dish(dish: DishRecord, snapshot: DishSnapshot) -> dict[str, object]:
    return {
        "id": str(dish.id),
        "name": dish.name,
        "notes": dish.notes,
        "image_base64": encode_image(dish.image_data),
        "taste_rating": dish.taste_rating,
        "presentation_rating": dish.presentation_rating,
        "value_rating": dish.value_rating,
        "average_rating": dish.average_rating,
        "created_at": dish.created_at.isoformat() if dish.created_at else None,
        "restaurant_id": str(dish.restaurant_id) if dish.restaurant_id else None,
        "restaurant_name": snapshot.restaurant_name(dish),
    }


def _serialize_restaurant(restaurant: RestaurantRecord) -> dict[str, object]:
    return {
        "id": str(restaurant.id),
        "name": restaurant.name,
        "location": restaurant.location,
        "visit_count": restaurant.visit_count,
    }


def _serialize_card(card: PlateCard) -> dict[str, object]:
    style = card.style
    return {
        "dish_id": str(card.dish_id),
        "title": card.title,
        "restaurant": card.restaurant,
        "overall": card.overall,
        "ratings": {
            "taste": card.taste,
            "presentation": card.presentation,
            "value": card.value,
        },
        "rating_band": card.rating_band,
        "notes": card.notes,
        "logged_on": card.logged_on.date().isoformat() if card.logged_on else None,
        "hashtag": card.hashtag,
        "theme": card.theme.value,
        "style": {
            "primary": style.primary,
            "secondary": style.secondary,
            "background": style.background,
            "accent": style.accent,
            "corner_radius": style.corner_radius,
            "font_weight": style.font_weight,
        },
        "text": card.text.model_dump(),
        "image_base64": encode_image(card.image_data),
    }


def _serialize_params(params: QueryParameters) -> dict[str, object]:
    return {
        "search_text": params.search_text,
        "sort": params.sort.value,
        "sort_label": params.sort.label,
        "min_rating": params.min_rating,
    }
