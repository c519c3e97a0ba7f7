"""Router tests."""

import json

import pytest
from roadrouter_core.errors import (
    RouteNotFound,
    RouterFrozenError,
    UnexpectedHandlerResult,
    UnsupportedMethod,
)
from roadrouter_core.http.request import Request, Response
from roadrouter_core.routing.router import Router
from roadrouter_core.services.registry import ServiceRegistry
from roadrouter_core.services.variables import Variables
from roadrouter_core.utils.config import RouterConfig


def echo_params(ctx):
    return Response.json(ctx.params)


def named(name):
    def handler(ctx):
        return Response.text(name)
    return handler


class TestRouterRegistration:
    """Test route registration."""

    def test_create_router(self):
        """Test router creation."""
        router = Router()
        assert router.get_routes() == []
        assert not router.is_dispatched

    def test_verb_shortcuts(self):
        """Test get/post/put/patch/delete register their verb."""
        router = Router()
        router.get("/a", echo_params)
        router.post("/a", echo_params)
        router.put("/a", echo_params)
        router.patch("/a", echo_params)
        router.delete("/a", echo_params)
        verbs = [route.verb for route in router.get_routes()]
        assert verbs == ["GET", "POST", "PUT", "PATCH", "DELETE"]

    def test_verb_is_normalized(self):
        """Test lower-case verbs are accepted."""
        router = Router()
        route = router.route("get", "/a", echo_params)
        assert route.verb == "GET"

    def test_unsupported_verb(self):
        """Test registering an unsupported verb."""
        router = Router()
        with pytest.raises(UnsupportedMethod):
            router.route("OPTIONS", "/a", echo_params)
        with pytest.raises(UnsupportedMethod):
            router.route("TRACE", "/a", echo_params)

    def test_handler_must_be_callable(self):
        """Test non-callable handler is rejected."""
        router = Router()
        with pytest.raises(TypeError):
            router.get("/a", "not a handler")

    def test_template_normalized(self):
        """Test templates are stored normalized."""
        router = Router()
        route = router.get("users/", echo_params)
        assert route.template == "/users"

    def test_duplicate_overwrites_in_place(self):
        """Test re-registering keeps the original position."""
        router = Router()
        router.get("/a", named("first"))
        router.get("/b", named("b"))
        router.get("/a/", named("second"))

        routes = router.get_routes()
        assert [r.template for r in routes] == ["/a", "/b"]
        response = router.run(Request("GET", "/a"))
        assert response.body == b"second"


class TestRouterDispatch:
    """Test request dispatch."""

    def test_static_route(self):
        """Test literal route dispatch."""
        router = Router()
        router.get("/health", named("ok"))
        response = router.run(Request("GET", "/health"))
        assert response.status == 200
        assert response.body == b"ok"

    def test_params_reach_handler(self):
        """Test captured params in request and context."""
        seen = {}

        def handler(ctx):
            seen["ctx"] = dict(ctx.params)
            seen["request"] = ctx.request.param("id")
            return Response.text("ok")

        router = Router()
        router.get("/users/{id:\\d+}", handler)
        router.run(Request("GET", "/users/42"))
        assert seen == {"ctx": {"id": "42"}, "request": "42"}

    def test_first_match_wins(self):
        """Test registration order decides between overlapping routes."""
        router = Router()
        router.get("/users/{id}", named("by-id"))
        router.get("/users/new", named("new"))
        response = router.run(Request("GET", "/users/new"))
        assert response.body == b"by-id"

    def test_literal_first_shadows_placeholder(self):
        """Test the literal route wins when registered first."""
        router = Router()
        router.get("/users/new", named("new"))
        router.get("/users/{id}", named("by-id"))
        response = router.run(Request("GET", "/users/new"))
        assert response.body == b"new"

    def test_trailing_slash_ignored(self):
        """Test trailing slash on the request path."""
        router = Router()
        router.get("/users", named("users"))
        response = router.run(Request("GET", "/users/"))
        assert response.body == b"users"

    def test_query_string_ignored(self):
        """Test query string is not part of matching."""
        router = Router()
        router.get("/search", named("search"))
        response = router.run(Request("GET", "/search?q=road"))
        assert response.body == b"search"

    def test_percent_decoding(self):
        """Test params are percent-decoded."""
        router = Router()
        router.get("/users/{name}", echo_params)
        response = router.run(Request("GET", "/users/john%20doe"))
        assert json.loads(response.body) == {"name": "john doe"}

    def test_root_route(self):
        """Test root path."""
        router = Router()
        router.get("/", named("home"))
        response = router.run(Request("GET", "/"))
        assert response.body == b"home"

    def test_request_method_is_normalized(self):
        """Test lower-case request methods."""
        router = Router()
        router.post("/items", named("created"))
        response = router.run(Request("post", "/items"))
        assert response.body == b"created"

    def test_case_sensitive_default(self):
        """Test paths are case-sensitive by default."""
        router = Router()
        router.get("/Users", named("users"))
        with pytest.raises(RouteNotFound):
            router.run(Request("GET", "/users"))

    def test_case_insensitive(self):
        """Test case-insensitive router."""
        router = Router(case_sensitive=False)
        router.get("/Users", named("users"))
        response = router.run(Request("GET", "/USERS"))
        assert response.body == b"users"

    def test_case_insensitive_basepath(self):
        """Test the base path follows the router case policy."""
        router = Router(basepath="/api", case_sensitive=False)
        router.get("/users", named("users"))
        response = router.run(Request("GET", "/API/USERS"))
        assert response.body == b"users"

    def test_case_sensitive_basepath(self):
        """Test the base path is case-sensitive by default."""
        router = Router(basepath="/api")
        router.get("/users", named("users"))
        with pytest.raises(RouteNotFound):
            router.run(Request("GET", "/API/users"))

    def test_services_and_variables_in_context(self):
        """Test services and variables are handed to handlers."""
        def handler(ctx):
            return Response.json({
                "db": ctx.services.get("db"),
                "name": ctx.variables.get("APP_NAME"),
            })

        router = Router()
        router.get("/info", handler)
        router.set_services(ServiceRegistry({"db": lambda: "sqlite"}))
        router.set_variables({"app_name": "road"})
        response = router.run(Request("GET", "/info"))
        assert json.loads(response.body) == {"db": "sqlite", "name": "road"}

    def test_set_variables_accepts_variables(self):
        """Test a Variables instance is kept as is."""
        variables = Variables({"a": 1})
        seen = {}

        def handler(ctx):
            seen["variables"] = ctx.variables
            return Response.text("ok")

        router = Router()
        router.get("/", handler)
        router.set_variables(variables)
        router.run(Request("GET", "/"))
        assert seen["variables"] is variables

    def test_no_services_configured(self):
        """Test context services default to None."""
        seen = {}

        def handler(ctx):
            seen["services"] = ctx.services
            return Response.text("ok")

        router = Router()
        router.get("/", handler)
        router.run(Request("GET", "/"))
        assert seen["services"] is None


class TestRouterBasepath:
    """Test base path handling."""

    def test_basepath_stripped(self):
        """Test routes are matched below the base path."""
        router = Router(basepath="/api/")
        router.get("/users", named("users"))
        response = router.run(Request("GET", "/api/users"))
        assert response.body == b"users"

    def test_basepath_root(self):
        """Test base path alone maps to the root route."""
        router = Router(basepath="/api")
        router.get("/", named("root"))
        response = router.run(Request("GET", "/api"))
        assert response.body == b"root"

    def test_outside_basepath(self):
        """Test paths outside the base path do not match."""
        router = Router(basepath="/api")
        router.get("/users", named("users"))
        with pytest.raises(RouteNotFound):
            router.run(Request("GET", "/users"))

    def test_basepath_prefix_only(self):
        """Test base path must end at a segment boundary."""
        router = Router(basepath="/api")
        router.get("/users", named("users"))
        with pytest.raises(RouteNotFound):
            router.run(Request("GET", "/apiusers"))

    def test_config(self):
        """Test base path and case policy from config."""
        config = RouterConfig(basepath="/v1", case_sensitive=False)
        router = Router(config=config)
        router.get("/Items", named("items"))
        response = router.run(Request("GET", "/v1/items"))
        assert response.body == b"items"


class TestRouterErrors:
    """Test dispatch failures."""

    def test_route_not_found(self):
        """Test unmatched path."""
        router = Router()
        router.get("/users", named("users"))
        with pytest.raises(RouteNotFound) as exc_info:
            router.run(Request("GET", "/posts"))
        assert exc_info.value.status == 404

    def test_wrong_verb_is_not_found(self):
        """Test path registered for another verb."""
        router = Router()
        router.post("/users", named("users"))
        with pytest.raises(RouteNotFound):
            router.run(Request("GET", "/users"))

    def test_unsupported_request_method(self):
        """Test unsupported method on a populated router."""
        router = Router()
        router.get("/users", named("users"))
        with pytest.raises(UnsupportedMethod) as exc_info:
            router.run(Request("TRACE", "/users"))
        assert exc_info.value.status == 405

    def test_options_without_cors(self):
        """Test OPTIONS is unsupported when CORS is not configured."""
        router = Router()
        router.get("/users", named("users"))
        with pytest.raises(UnsupportedMethod):
            router.run(Request("OPTIONS", "/users"))

    def test_unexpected_handler_result(self):
        """Test handler returning a non-Response."""
        router = Router()
        router.get("/bad", lambda ctx: "oops")
        with pytest.raises(UnexpectedHandlerResult):
            router.run(Request("GET", "/bad"))

    def test_handler_exception_propagates(self):
        """Test handler errors are not swallowed."""
        def handler(ctx):
            raise ValueError("boom")

        router = Router()
        router.get("/boom", handler)
        with pytest.raises(ValueError):
            router.run(Request("GET", "/boom"))


class TestRouterLifecycle:
    """Test compile and single dispatch."""

    def test_welcome_response(self):
        """Test empty router answers with a welcome document."""
        router = Router()
        response = router.run(Request("GET", "/anything"))
        assert response.status == 200
        data = json.loads(response.body)
        assert data["message"] == "Welcome to RoadRouter!"
        assert data["status"] == "No routes registered"

    def test_run_twice(self):
        """Test a router dispatches only once."""
        router = Router()
        router.get("/", named("home"))
        assert router.run(Request("GET", "/")) is not None
        assert router.is_dispatched
        assert router.run(Request("GET", "/")) is None

    def test_run_twice_skips_middleware(self):
        """Test the second run executes no middleware."""
        calls = []

        def count(ctx, next_handler):
            calls.append(1)
            return next_handler(ctx)

        router = Router()
        router.get("/", named("home")).before(count)
        request = Request("GET", "/")
        router.run(request)
        router.run(request)
        assert calls == [1]

    def test_run_twice_after_error(self):
        """Test a failed dispatch still consumes the router."""
        router = Router()
        router.get("/", named("home"))
        with pytest.raises(RouteNotFound):
            router.run(Request("GET", "/missing"))
        assert router.run(Request("GET", "/")) is None

    def test_register_after_compile(self):
        """Test registry is frozen once compiled."""
        router = Router()
        router.get("/", named("home"))
        router.compile()
        with pytest.raises(RouterFrozenError):
            router.get("/late", named("late"))
        with pytest.raises(RouterFrozenError):
            router.group("/late")

    def test_route_frozen_after_compile(self):
        """Test route configuration is frozen once compiled."""
        router = Router()
        route = router.get("/", named("home"))
        router.compile()
        assert route.is_frozen
        with pytest.raises(RouterFrozenError):
            route.before(lambda ctx, nxt: nxt(ctx))

    def test_compile_idempotent(self):
        """Test compiling twice keeps one copy of each route."""
        router = Router()
        router.group("/g", lambda g: g.get("/a", named("a")))
        router.compile()
        router.compile()
        assert len(router.get_routes()) == 1
