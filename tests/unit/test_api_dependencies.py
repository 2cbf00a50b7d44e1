from starlette.requests import Request

from backend.buq.api.dependencies import ActorContext, get_actor_context, get_page_spec
from backend.buq.config import ActorConfig, PaginationConfig, Settings
from backend.buq.domain.common import SortDirection, SortOrder

SETTINGS = Settings(
    pagination=PaginationConfig(default_page_size=15, max_page_size=40),
    actor=ActorConfig(default_id="api_request", default_source="buq_api"),
)


def _make_request(headers: dict[str, str] | None = None) -> Request:
    header_list = [
        (key.lower().encode("latin-1"), value.encode("latin-1"))
        for key, value in (headers or {}).items()
    ]
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "query_string": b"",
        "headers": header_list,
        "client": ("test", 1234),
        "server": ("testserver", 80),
        "scheme": "http",
    }
    return Request(scope)


def test_get_actor_context_defaults() -> None:
    context = get_actor_context(_make_request(), SETTINGS)

    assert isinstance(context, ActorContext)
    assert context.actor_id == "api_request"
    assert context.actor_source == "buq_api"


def test_get_actor_context_honors_headers() -> None:
    context = get_actor_context(
        _make_request(
            {
                "X-Actor-Id": "  operator ",
                "X-Actor-Source": " desktop_app ",
            }
        ),
        SETTINGS,
    )

    assert context.actor_id == "operator"
    assert context.actor_source == "desktop_app"


def test_get_page_spec_applies_configured_limits() -> None:
    default = get_page_spec(page=0, size=None, sort=None, settings=SETTINGS)
    clamped = get_page_spec(page=2, size=1000, sort=["name,desc"], settings=SETTINGS)

    assert default.size == 15
    assert clamped.size == 40
    assert clamped.page == 2
    assert clamped.sort == (SortOrder("name", SortDirection.DESC),)
