"""
Pytest configuration and shared fixtures for codequery tests.

Provides an in-memory sample corpus (classes, models, routes, views), the
same corpus as decoded snapshot data, and a snapshot file on disk.
"""

import json

import pytest

from codequery.corpus import Corpus, corpus_from_dict

CONTROLLERS = "App\\Http\\Controllers"
ELOQUENT = "Illuminate\\Database\\Eloquent"

SAMPLE_DATA = {
    "classes": [
        {
            "name": f"{CONTROLLERS}\\UserController",
            "traits": ["Illuminate\\Foundation\\Auth\\Access\\AuthorizesRequests"],
            "parents": [f"{CONTROLLERS}\\Controller"],
            "file": "app/Http/Controllers/UserController.php",
        },
        {
            "name": f"{CONTROLLERS}\\PostController",
            "traits": ["Illuminate\\Foundation\\Auth\\Access\\AuthorizesRequests"],
            "parents": [f"{CONTROLLERS}\\Controller"],
        },
        {
            "name": "App\\Services\\BillingService",
            "interfaces": ["App\\Contracts\\Billable", "JsonSerializable"],
            "traits": ["Illuminate\\Support\\Traits\\Macroable"],
        },
    ],
    "models": [
        {
            "name": "App\\Models\\User",
            "interfaces": ["Illuminate\\Contracts\\Auth\\Authenticatable"],
            "traits": [
                "Illuminate\\Notifications\\Notifiable",
                f"{ELOQUENT}\\Factories\\HasFactory",
            ],
            "parents": ["Illuminate\\Foundation\\Auth\\User", f"{ELOQUENT}\\Model"],
            "properties": ["id", "name", "email", "password"],
            "fillable": ["name", "email", "password"],
            "hidden": ["password"],
            "relations": [
                {"name": "posts", "related": "App\\Models\\Post", "type": "HasMany"},
            ],
        },
        {
            "name": "App\\Models\\Post",
            "traits": [f"{ELOQUENT}\\Factories\\HasFactory", f"{ELOQUENT}\\SoftDeletes"],
            "parents": [f"{ELOQUENT}\\Model"],
            "properties": ["id", "title", "user_id"],
            "fillable": ["title"],
            "relations": [
                {"name": "author", "related": "App\\Models\\User", "type": "BelongsTo"},
                {"name": "comments", "related": "App\\Models\\Comment", "type": "HasMany"},
            ],
        },
        {
            "name": "App\\Models\\Comment",
            "parents": [f"{ELOQUENT}\\Model"],
            "properties": ["id", "body", "post_id"],
            "relations": [
                {"name": "post", "related": "App\\Models\\Post", "type": "BelongsTo"},
            ],
        },
    ],
    "routes": [
        {
            "name": "home",
            "uri": "/",
            "methods": ["GET", "HEAD"],
            "controller": None,
            "middleware": ["web"],
        },
        {
            "name": "posts.index",
            "uri": "posts",
            "methods": ["GET", "HEAD"],
            "controller": f"{CONTROLLERS}\\PostController",
            "action": "index",
            "middleware": ["web"],
        },
        {
            "name": "posts.show",
            "uri": "posts/{post}",
            "methods": ["GET", "HEAD"],
            "controller": f"{CONTROLLERS}\\PostController",
            "action": "show",
            "middleware": ["web"],
            "parameters": ["post"],
        },
        {
            "name": "posts.store",
            "uri": "posts",
            "methods": ["POST"],
            "controller": f"{CONTROLLERS}\\PostController",
            "action": "store",
            "middleware": ["web", "auth"],
        },
        {
            "name": None,
            "uri": "api/users/{user}",
            "methods": ["GET", "HEAD"],
            "controller": f"{CONTROLLERS}\\Api\\UserController",
            "action": "show",
            "middleware": ["api", "auth:sanctum"],
            "parameters": ["user"],
        },
        {
            "name": "admin.users.destroy",
            "uri": "admin/users/{user}",
            "methods": ["DELETE"],
            "controller": f"{CONTROLLERS}\\Admin\\UserController",
            "action": "destroy",
            "middleware": ["web", "auth", "admin"],
            "parameters": ["user"],
        },
    ],
    "views": [
        {"name": "pages.home", "references": ["layouts.app", "components.button"]},
        {"name": "pages.admin.dashboard", "references": ["layouts.app", "partials.stats"]},
        {"name": "layouts.app", "references": ["partials.nav"]},
        {"name": "partials.nav", "references": []},
        {"name": "partials.stats", "references": ["components.button"]},
        {"name": "components.button.index", "references": []},
        {
            "name": "filament::components.modal.index",
            "references": ["filament::components.button"],
        },
        {"name": "filament::components.button", "references": []},
    ],
}


@pytest.fixture
def sample_data():
    """Decoded snapshot data for the sample corpus (a fresh copy per test)."""
    return json.loads(json.dumps(SAMPLE_DATA))


@pytest.fixture
def sample_corpus(sample_data) -> Corpus:
    """The sample corpus as validated entities."""
    return corpus_from_dict(sample_data)


@pytest.fixture
def corpus_file(tmp_path, sample_data):
    """The sample corpus written as a snapshot file."""
    path = tmp_path / "corpus.json"
    path.write_text(json.dumps(sample_data), encoding="utf-8")
    return path


@pytest.fixture
def abc_corpus() -> Corpus:
    """Three classes: App\\A implements I1, App\\B implements I1 and I2, App\\C none."""
    return corpus_from_dict(
        {
            "classes": [
                {"name": "App\\A", "interfaces": ["I1"]},
                {"name": "App\\B", "interfaces": ["I1", "I2"]},
                {"name": "App\\C"},
            ]
        }
    )
