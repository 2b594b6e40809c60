"""Pytest fixtures for fluent-introspect tests."""

import pytest
from pathlib import Path

from fluent_introspect import (
    Container,
    EventDispatcher,
    FileViewFinder,
    MiddlewareRegistry,
    Router,
)
from fluent_introspect.discovery import import_modules

from sample_app.controllers import AdminDashboard, UserController
from sample_app.events import UserRegistered
from sample_app.jobs import SendWelcomeEmail
from sample_app.services import MailServiceProvider, Mailer, health_check, notify_customer

SAMPLE_MODULES = ["sample_app"]

# discovery only sees classes from imported modules
import_modules(SAMPLE_MODULES)

# Template tree: relative path -> source
TEMPLATES = {
    "home.html": (
        '{% extends "layouts/app.html" %}\n'
        '{% include "partials/nav.html" %}\n'
        "{% include 'partials/footer.html' %}\n"
    ),
    "notes.txt": "not a template",
    "emails/welcome.html": "<p>Welcome!</p>",
    "layouts/app.html": "<html>{% block content %}{% endblock %}</html>",
    "partials/footer.html": "<footer></footer>",
    "partials/nav.html": "<nav></nav>",
    "users/index.html": '{% extends "layouts/app.html" %}{%- include "partials/nav.html" %}',
}

MAIL_TEMPLATES = {
    "message.html": '{% extends "layouts/app.html" %}',
}


def _write_tree(root: Path, files: dict) -> Path:
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return root


@pytest.fixture
def router() -> Router:
    """Routes with named, unnamed, parametrised-middleware and invokable entries."""
    router = Router()
    router.get("/", "sample_app.controllers.HomeController@index", name="home")
    router.get(
        "users",
        (UserController, "index"),
        name="users.index",
        middleware=["auth", "throttle:60,1"],
    )
    router.post(
        "users", (UserController, "store"), name="users.store", middleware=["auth", "verified"]
    )
    router.get(
        "admin/dashboard", AdminDashboard, name="admin.dashboard", middleware=["auth", "admin"]
    )
    router.delete(
        "admin/users/{id}",
        "sample_app.controllers.UserController@destroy",
        middleware=["auth", "admin"],
    )
    router.get("health", health_check)
    return router


@pytest.fixture
def dispatcher() -> EventDispatcher:
    dispatcher = EventDispatcher()
    dispatcher.listen(UserRegistered, SendWelcomeEmail)
    dispatcher.listen("order.shipped", notify_customer)
    dispatcher.listen("order.shipped", ("sample_app.listeners.AuditLog", "handle"))
    dispatcher.listen("cache.cleared")
    return dispatcher


@pytest.fixture
def container() -> Container:
    container = Container()
    container.register("app.providers.AppServiceProvider")
    container.register("app.providers.EventServiceProvider")
    container.register("app.providers.CacheServiceProvider", provides=["cache", "cache.store"])
    container.register(MailServiceProvider, provides=[Mailer])
    return container


@pytest.fixture
def middleware_registry() -> MiddlewareRegistry:
    registry = MiddlewareRegistry()
    registry.alias("auth", "app.http.middleware.Authenticate")
    registry.alias("throttle", "app.http.middleware.ThrottleRequests")
    registry.alias("admin", "app.http.middleware.EnsureAdmin")
    registry.group(
        "web",
        ["app.http.middleware.EncryptCookies", "app.http.middleware.StartSession", "auth"],
    )
    registry.group("api", ["throttle", "app.http.middleware.SubstituteBindings"])
    registry.push_global("app.http.middleware.TrustProxies")
    registry.push_global("app.http.middleware.EncryptCookies")
    registry.set_priority(["app.http.middleware.StartSession", "app.http.middleware.Authenticate"])
    return registry


@pytest.fixture
def templates_dir(tmp_path: Path) -> Path:
    """Create a template tree for the views tests."""
    return _write_tree(tmp_path / "templates", TEMPLATES)


@pytest.fixture
def view_finder(tmp_path: Path, templates_dir: Path) -> FileViewFinder:
    mail_dir = _write_tree(tmp_path / "mail", MAIL_TEMPLATES)
    return FileViewFinder([templates_dir], hints={"mail": [mail_dir]})


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch) -> Path:
    """Run from an empty project directory with no user config."""
    project = tmp_path / "project"
    project.mkdir()
    (project / ".git").mkdir()
    user_config = tmp_path / "user" / "config.toml"
    monkeypatch.setattr("fluent_introspect.config.USER_CONFIG_PATH", user_config)
    monkeypatch.chdir(project)
    return project
