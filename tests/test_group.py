"""Route group tests."""

import pytest
from roadrouter_core.errors import RouteNotFound, RouterFrozenError, ServiceNotFound
from roadrouter_core.http.request import Request, Response
from roadrouter_core.routing.group import join_paths
from roadrouter_core.routing.router import Router
from roadrouter_core.services.registry import ServiceRegistry


def named(name):
    def handler(ctx):
        return Response.text(name)
    return handler


def tag(label, trail):
    """Middleware recording its label before continuing."""
    def middleware(ctx, next_handler):
        trail.append(label)
        return next_handler(ctx)
    return middleware


class TestJoinPaths:
    """Test prefix joining."""

    def test_join(self):
        """Test prefix and path are joined with one slash."""
        assert join_paths("/admin", "/users") == "/admin/users"
        assert join_paths("/admin/", "users/") == "/admin/users"

    def test_root_prefix(self):
        """Test root prefix adds nothing."""
        assert join_paths("/", "/users") == "/users"

    def test_root_path(self):
        """Test group root route."""
        assert join_paths("/admin", "/") == "/admin"


class TestGroup:
    """Test group routes."""

    def test_prefix_applied(self):
        """Test routes are registered under the prefix."""
        router = Router()
        router.group("/admin", lambda g: g.get("/reports", named("reports")))
        response = router.run(Request("GET", "/admin/reports"))
        assert response.body == b"reports"

    def test_body_runs_once(self):
        """Test the body runs at compile time, once."""
        calls = []

        def body(group):
            calls.append(group)
            group.get("/a", named("a"))

        router = Router()
        router.group("/g", body)
        assert calls == []
        router.compile()
        router.compile()
        assert len(calls) == 1

    def test_routes_without_body(self):
        """Test routes declared directly on the group."""
        router = Router()
        group = router.group("/api")
        group.post("/items", named("created"))
        response = router.run(Request("POST", "/api/items"))
        assert response.body == b"created"

    def test_all_verbs(self):
        """Test group verb shortcuts."""
        def body(group):
            group.get("/x", named("get"))
            group.post("/x", named("post"))
            group.put("/x", named("put"))
            group.patch("/x", named("patch"))
            group.delete("/x", named("delete"))

        router = Router()
        router.group("/g", body)
        router.compile()
        assert [r.verb for r in router.get_routes()] == [
            "GET", "POST", "PUT", "PATCH", "DELETE",
        ]

    def test_group_routes_after_top_level(self):
        """Test group routes follow routes registered directly."""
        router = Router()
        router.group("/users", lambda g: g.get("/{id}", named("group")))
        router.get("/users/{name}", named("top"))
        response = router.run(Request("GET", "/users/7"))
        assert response.body == b"top"

    def test_nested_groups(self):
        """Test nested prefixes are concatenated."""
        def api(group):
            group.group("/v1", lambda v1: v1.get("/users", named("v1-users")))

        router = Router()
        router.group("/api", api)
        response = router.run(Request("GET", "/api/v1/users"))
        assert response.body == b"v1-users"

    def test_frozen_after_compile(self):
        """Test a built group rejects every change."""
        router = Router()
        group = router.group("/admin")
        group.get("/a", named("a"))
        router.compile()

        assert group.is_frozen
        with pytest.raises(RouterFrozenError):
            group.get("/late", named("late"))
        with pytest.raises(RouterFrozenError):
            group.group("/late")
        with pytest.raises(RouterFrozenError):
            group.before(lambda ctx, next_handler: next_handler(ctx))
        with pytest.raises(RouterFrozenError):
            group.use_services("db")
        assert [r.template for r in router.get_routes()] == ["/admin/a"]

    def test_nested_group_frozen_after_compile(self):
        """Test nested groups are frozen too."""
        holder = {}

        def body(group):
            holder["inner"] = group.group("/inner", lambda g: g.get("/a", named("a")))

        router = Router()
        router.group("/outer", body)
        router.compile()
        with pytest.raises(RouterFrozenError):
            holder["inner"].post("/late", named("late"))

    def test_outside_prefix(self):
        """Test the bare route path is not registered."""
        router = Router()
        router.group("/admin", lambda g: g.get("/reports", named("reports")))
        with pytest.raises(RouteNotFound):
            router.run(Request("GET", "/reports"))


class TestGroupMiddleware:
    """Test middleware inheritance."""

    def test_group_middleware_applies(self):
        """Test group middleware runs for its routes."""
        trail = []
        router = Router()
        router.group("/g", lambda g: g.get("/a", named("a"))).before(tag("group", trail))
        router.run(Request("GET", "/g/a"))
        assert trail == ["group"]

    def test_route_middleware_overrides_group(self):
        """Test route middleware replaces the group's."""
        trail = []

        def body(group):
            group.get("/a", named("a")).before(tag("route", trail))

        router = Router()
        router.group("/g", body).before(tag("group", trail))
        router.run(Request("GET", "/g/a"))
        assert trail == ["route"]

    def test_nested_group_inherits(self):
        """Test a nested group without middleware uses the parent's."""
        trail = []

        def body(group):
            group.group("/inner", lambda inner: inner.get("/a", named("a")))

        router = Router()
        router.group("/outer", body).before(tag("outer", trail))
        router.run(Request("GET", "/outer/inner/a"))
        assert trail == ["outer"]

    def test_nested_group_overrides(self):
        """Test a nested group with its own middleware replaces the parent's."""
        trail = []

        def body(group):
            inner = group.group("/inner", lambda g: g.get("/a", named("a")))
            inner.before(tag("inner", trail))

        router = Router()
        router.group("/outer", body).before(tag("outer", trail))
        router.run(Request("GET", "/outer/inner/a"))
        assert trail == ["inner"]

    def test_group_middleware_order(self):
        """Test group middleware runs in declaration order."""
        trail = []
        router = Router()
        group = router.group("/g", lambda g: g.get("/a", named("a")))
        group.before(tag("first", trail), tag("second", trail))
        router.run(Request("GET", "/g/a"))
        assert trail == ["first", "second"]


class TestGroupServices:
    """Test service whitelists on groups."""

    def make_services(self):
        return ServiceRegistry({
            "db": lambda: "db",
            "mailer": lambda: "mailer",
        })

    def test_group_services_scope(self):
        """Test group whitelist scopes its routes."""
        seen = {}

        def handler(ctx):
            seen["keys"] = ctx.services.keys()
            return Response.text("ok")

        router = Router()
        router.set_services(self.make_services())
        router.group("/g", lambda g: g.get("/a", handler)).use_services("db")
        router.run(Request("GET", "/g/a"))
        assert seen["keys"] == ["db"]

    def test_route_services_override_group(self):
        """Test route whitelist replaces the group's."""
        def handler(ctx):
            ctx.services.get("db")
            return Response.text("ok")

        def body(group):
            group.get("/a", handler).use_services("mailer")

        router = Router()
        router.set_services(self.make_services())
        router.group("/g", body).use_services("db")
        with pytest.raises(ServiceNotFound):
            router.run(Request("GET", "/g/a"))
