"""Orchestrator: validate the URL, fetch the page and run the extraction tiers."""

import ipaddress
import logging
from typing import Awaitable, Callable, NamedTuple
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup

from recipe_keeper.models import (
    ExtractedRecipe,
    FetchFailed,
    InvalidUrl,
    NoRecipeFound,
    is_valid_recipe,
)
from recipe_keeper.parser.heuristic import extract_heuristic
from recipe_keeper.parser.structured import extract_from_json_ld, extract_from_microdata

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; RecipeKeeper/1.0; +https://recipekeeper.com/bot)"
REQUEST_TIMEOUT = 10.0

REQUEST_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
}

_BLOCKED_NETWORKS = [
    ipaddress.ip_network("0.0.0.0/8"),
    ipaddress.ip_network("127.0.0.0/8"),
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
    ipaddress.ip_network("169.254.0.0/16"),
    ipaddress.ip_network("::1/128"),
    ipaddress.ip_network("fc00::/7"),
]


class FetchedPage(NamedTuple):
    status: int
    status_text: str
    body: str


Fetcher = Callable[[str, dict[str, str]], Awaitable[FetchedPage]]


def validate_url(url: str) -> None:
    """Reject anything that isn't an absolute http(s) URL to a public host.

    No DNS lookup is done here, so nothing touches the network before the
    URL has been accepted.
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidUrl("Please enter a URL to extract a recipe from.")

    try:
        parsed = urlparse(url.strip())
        hostname = parsed.hostname
        parsed.port
    except ValueError:
        logger.warning("Rejected malformed URL: %s", url)
        raise InvalidUrl("Invalid URL.")

    if parsed.scheme not in ("http", "https"):
        logger.warning("Rejected URL with scheme %r: %s", parsed.scheme, url)
        raise InvalidUrl("Only http and https URLs are supported.")

    if not hostname:
        logger.warning("Rejected URL with no hostname: %s", url)
        raise InvalidUrl("Invalid URL.")

    if hostname == "localhost" or hostname.endswith(".localhost"):
        logger.warning("Blocked localhost URL: %s", url)
        raise InvalidUrl("Requests to private or internal addresses are not allowed.")

    try:
        ip = ipaddress.ip_address(hostname)
    except ValueError:
        return

    # "::ffff:127.0.0.1" reaches the same host as "127.0.0.1"
    if ip.version == 6 and ip.ipv4_mapped is not None:
        ip = ip.ipv4_mapped

    if ip.is_unspecified or any(ip in network for network in _BLOCKED_NETWORKS):
        logger.warning("Blocked private IP %s for URL %s", ip, url)
        raise InvalidUrl("Requests to private or internal addresses are not allowed.")


async def fetch_text(url: str, headers: dict[str, str]) -> FetchedPage:
    """GET a page with httpx. Non-2xx statuses are returned, not raised."""
    try:
        async with httpx.AsyncClient(
            timeout=REQUEST_TIMEOUT,
            follow_redirects=True,
            headers=headers,
        ) as client:
            response = await client.get(url)
    except httpx.TimeoutException:
        logger.warning("Timeout fetching %s", url)
        raise FetchFailed("Request timed out. The site may be slow or down.")
    except httpx.ConnectError:
        logger.warning("Connection error fetching %s", url)
        raise FetchFailed(
            "Couldn't connect to the site. It may be down or the URL may be wrong."
        )
    except httpx.RequestError as e:
        logger.warning("Request error fetching %s: %s", url, e)
        raise FetchFailed(
            "Something went wrong fetching that page. Check the URL and try again."
        )

    return FetchedPage(
        status=response.status_code,
        status_text=response.reason_phrase,
        body=response.text,
    )


def _status_message(status: int) -> str:
    if status in (401, 403):
        return "This site blocked the request. It may require a login or restrict automated access."
    if status == 404:
        return "Page not found. Double-check the URL and make sure it points to a recipe page."
    if status >= 500:
        return "The recipe site is having server issues. Try again in a few minutes."
    return f"The site returned an error (HTTP {status})."


def extract_from_html(html: str, url: str) -> ExtractedRecipe:
    """Run the extraction tiers over an already-fetched page.

    Tiers run in order and the first result that passes the validity check
    wins. Raises NoRecipeFound when none does.
    """
    soup = BeautifulSoup(html, "html.parser")

    tiers = [
        ("Tier 1 (json-ld)", lambda: extract_from_json_ld(soup, url)),
        ("Tier 2 (microdata)", lambda: extract_from_microdata(html, url)),
        ("Tier 3 (heuristic)", lambda: extract_heuristic(soup, url)),
    ]

    for name, extract in tiers:
        recipe = extract()
        if is_valid_recipe(recipe):
            logger.info("%s succeeded for %s", name, url)
            return recipe
        if recipe is None:
            logger.debug("%s found nothing for %s", name, url)
        else:
            logger.debug("%s found an incomplete recipe for %s", name, url)

    logger.warning("All tiers failed for %s", url)
    raise NoRecipeFound()


class RecipeUrlExtractor:
    """Fetch a URL and extract a recipe from it.

    The fetcher is injectable; by default pages are fetched with httpx.
    """

    def __init__(self, fetch: Fetcher = fetch_text):
        self._fetch = fetch

    async def extract_from_url(self, url: str) -> ExtractedRecipe:
        validate_url(url)
        url = url.strip()

        logger.info("Parsing recipe from %s", url)
        page = await self._fetch(url, dict(REQUEST_HEADERS))

        if not 200 <= page.status < 300:
            logger.warning("HTTP %d from %s", page.status, url)
            raise FetchFailed(
                _status_message(page.status),
                status=page.status,
                status_text=page.status_text,
            )

        logger.info("Fetched %s (HTTP %d, %d bytes)", url, page.status, len(page.body))
        return extract_from_html(page.body, url)


async def extract_recipe_from_url(url: str) -> ExtractedRecipe:
    """Fetch a URL and extract a recipe from it using the default fetcher."""
    return await RecipeUrlExtractor().extract_from_url(url)
