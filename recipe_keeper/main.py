"""FastAPI application exposing recipe extraction and ingredient parsing."""

import logging

from cachetools import TTLCache
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware

from recipe_keeper.models import (
    ExtractedRecipe,
    FetchFailed,
    InvalidUrl,
    NoRecipeFound,
    ParsedIngredient,
)
from recipe_keeper.parser.ingredients import format_ingredient, parse_ingredient_lines
from recipe_keeper.parser.pipeline import extract_recipe_from_url

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

RATE_LIMIT = "30/minute"
CACHE_MAXSIZE = 128
CACHE_TTL = 30 * 60

# Extracted recipes are immutable, so cached instances can be shared.
_recipe_cache: TTLCache[str, ExtractedRecipe] = TTLCache(
    maxsize=CACHE_MAXSIZE, ttl=CACHE_TTL
)

limiter = Limiter(key_func=get_remote_address)
app = FastAPI(title="Recipe Keeper")
app.state.limiter = limiter


class ExtractRequest(BaseModel):
    url: str


class ParseIngredientsRequest(BaseModel):
    lines: list[str]


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"error": error, "message": message}
    )


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return _error(
        429,
        "Too many requests",
        "You're sending too many requests. Please wait a moment and try again.",
    )


@app.exception_handler(RequestValidationError)
async def validation_handler(request: Request, exc: RequestValidationError):
    return _error(400, "Invalid request", "The request body is missing or malformed.")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


app.add_middleware(SecurityHeadersMiddleware)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post("/api/recipes/url/extract")
@limiter.limit(RATE_LIMIT)
async def extract_recipe(request: Request, payload: ExtractRequest):
    url = payload.url.strip()

    recipe = _recipe_cache.get(url)
    if recipe is not None:
        logger.info("Cache hit for %s", url)
    else:
        try:
            recipe = await extract_recipe_from_url(url)
        except InvalidUrl as e:
            logger.warning("Invalid URL %r: %s", url, e.message)
            return _error(400, "Invalid URL format", e.message)
        except NoRecipeFound as e:
            logger.warning("No recipe found at %s", url)
            return _error(422, "No recipe found", e.message)
        except FetchFailed as e:
            logger.warning("Fetch failed [%s] for %s: %s", e.error_type, url, e.message)
            return _error(422, "Could not access URL", e.message)
        except Exception:
            logger.exception("Unexpected error extracting recipe from %s", url)
            return _error(
                500,
                "Failed to extract recipe",
                "An error occurred while extracting the recipe. Please try again or use a different URL.",
            )
        _recipe_cache[url] = recipe

    logger.info("Served recipe %r from %s", recipe.title, url)
    parsed = parse_ingredient_lines(recipe.ingredients or [])
    return {
        "success": True,
        "recipe": recipe.model_dump(mode="json", by_alias=True, exclude_none=True),
        "parsedIngredients": [p.model_dump(exclude_none=True) for p in parsed],
        "extractedFrom": url,
    }


@app.post("/api/ingredients/parse")
async def parse_ingredients(payload: ParseIngredientsRequest):
    parsed = parse_ingredient_lines(payload.lines)
    return {"ingredients": [p.model_dump(exclude_none=True) for p in parsed]}


@app.post("/api/ingredients/format")
async def format_ingredient_route(payload: ParsedIngredient):
    return {"text": format_ingredient(payload)}
