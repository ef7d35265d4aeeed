import json
from pathlib import Path

import pytest

BASE_CONFIG = {
    "domain": "https://example.com",
    "seo": True,
    "title": "Example",
    "dist_dir": "dist",
    "description": "An example site",
    "prod_url": "https://example.com",
    "dev_url": "http://localhost:8000",
    "copy_files": False,
    "has_loop_content": True,
    "loop_content_dirs": ["posts"],
    "user_config": {"author": "Jo"},
}


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def page(layout: str, body: str, **params) -> str:
    lines = ["---", f"layout: {layout}"]
    lines.extend(f"{key}: {value}" for key, value in params.items())
    lines.append("---")
    return "\n".join(lines) + "\n" + body


def write_project(root: Path, **overrides) -> Path:
    config = {**BASE_CONFIG, **overrides}
    write(root / "config.json", json.dumps(config))
    write(
        root / "layouts" / "default.jinja",
        "{% include 'header' %}<main>{{ page.content }}</main>",
    )
    write(
        root / "layouts" / "post.html.jinja",
        '<article data-base="{{ baseurl }}"><h1>{{ page.params.title }}</h1>'
        "{{ page.content }}</article>",
    )
    write(
        root / "layouts" / "listing.jinja",
        "<ul>{% for post in loop_content.posts %}"
        '<li><a href="{{ post.url }}">{{ post.params.title }}</a></li>'
        "{% endfor %}</ul>"
        "<nav>{% for item in data.nav %}{{ item.label }}{% endfor %}</nav>",
    )
    write(root / "partials" / "header.jinja", "<header>{{ site.title }}</header>")
    write(root / "index.markdown", page("default", "# Welcome\n\nHello there.\n"))
    write(root / "about.markdown", page("default", "About us.\n"))
    write(root / "posts" / "first.markdown", page("post", "First body.\n", title="First"))
    write(
        root / "posts" / "second.markdown", page("post", "Second body.\n", title="Second")
    )
    write(root / "blog" / "index.markdown", page("listing", ""))
    write(root / "data" / "nav.yml", "- label: Home\n  url: /\n- label: Blog\n  url: /blog/\n")
    return root


@pytest.fixture
def make_project(tmp_path):
    """Return a factory writing a complete project under tmp_path/site."""

    def factory(**overrides) -> Path:
        return write_project(tmp_path / "site", **overrides)

    return factory
