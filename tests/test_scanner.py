import json
from pathlib import Path

import pytest

from quire.config import ProjectConfig
from quire.errors import (
    InconsistentConfigError,
    MalformedContentError,
    MalformedDataError,
    MissingDirectoryError,
    MissingFileError,
    NoContentFoundError,
    ScanError,
)
from quire.scanner import (
    DataFormat,
    find_by_extension,
    find_content_files,
    find_data_files,
    find_layouts,
    find_loop_content_groups,
    find_partials,
    find_stylesheet_entry,
    template_name,
)

from conftest import BASE_CONFIG, page, write


def make_config(**overrides) -> ProjectConfig:
    return ProjectConfig.from_mapping({**BASE_CONFIG, **overrides})


def test_find_by_extension_matches_exact_extension(tmp_path):
    write(tmp_path / "b.markdown", "")
    write(tmp_path / "nested" / "a.markdown", "")
    write(tmp_path / "notes.md", "")
    write(tmp_path / "backup.markdown.bak", "")

    found = find_by_extension(tmp_path, "markdown")

    assert found == sorted([tmp_path / "b.markdown", tmp_path / "nested" / "a.markdown"])


def test_find_by_extension_returns_none_when_empty(tmp_path):
    write(tmp_path / "readme.txt", "")
    assert find_by_extension(tmp_path, "markdown") is None


def test_find_by_extension_missing_directory(tmp_path):
    with pytest.raises(ScanError):
        find_by_extension(tmp_path / "missing", "markdown")


def test_template_name():
    assert template_name(Path("layouts/post.jinja")) == "post"
    assert template_name(Path("layouts/post.html.jinja")) == "post"
    assert template_name(Path("layouts/feed.xml.jinja")) == "feed.xml"


def test_find_content_files_routes_every_file(make_project):
    root = make_project()

    content = find_content_files(root, make_config())

    assert set(content) == {
        root / "index.markdown",
        root / "about.markdown",
        root / "blog" / "index.markdown",
        root / "posts" / "first.markdown",
        root / "posts" / "second.markdown",
    }
    assert content[root / "about.markdown"].url == "/about/"
    assert content[root / "index.markdown"].path == root / "dist" / "index.html"


def test_find_content_files_skips_output_directory(make_project):
    root = make_project()
    write(root / "dist" / "stale.markdown", page("default", "old"))

    content = find_content_files(root, make_config())

    assert root / "dist" / "stale.markdown" not in content


def test_find_content_files_without_content(tmp_path):
    with pytest.raises(NoContentFoundError):
        find_content_files(tmp_path, make_config())


def test_loop_content_disabled(make_project):
    root = make_project()
    config = make_config(has_loop_content=False)
    assert find_loop_content_groups(root, config) is None


def test_loop_content_groups(make_project):
    root = make_project()

    groups = find_loop_content_groups(root, make_config())

    assert list(groups) == ["posts"]
    titles = [record.params["title"] for record in groups["posts"]]
    assert titles == ["First", "Second"]
    assert groups["posts"][0].url == "/posts/first/"


def test_loop_content_without_dirs(make_project):
    root = make_project()
    config = ProjectConfig(**{**BASE_CONFIG, "loop_content_dirs": None})

    with pytest.raises(InconsistentConfigError):
        find_loop_content_groups(root, config)


def test_loop_content_directory_without_content(make_project):
    root = make_project()
    (root / "empty").mkdir()

    with pytest.raises(NoContentFoundError):
        find_loop_content_groups(root, make_config(loop_content_dirs=["empty"]))


def test_find_layouts(make_project):
    root = make_project()

    layouts = find_layouts(root)

    assert [layout.name for layout in layouts] == ["default", "listing", "post"]
    assert layouts[0].source.startswith("{% include 'header' %}")


def test_find_layouts_missing_directory(tmp_path):
    with pytest.raises(MissingDirectoryError):
        find_layouts(tmp_path)


def test_find_layouts_empty_directory(tmp_path):
    (tmp_path / "layouts").mkdir()
    with pytest.raises(MissingDirectoryError):
        find_layouts(tmp_path)


def test_find_partials(make_project):
    root = make_project()
    assert find_partials(root) == {"header": "<header>{{ site.title }}</header>"}


def test_find_partials_first_duplicate_wins(tmp_path):
    write(tmp_path / "partials" / "a" / "nav.jinja", "first")
    write(tmp_path / "partials" / "nav.html.jinja", "second")

    assert find_partials(tmp_path) == {"nav": "first"}


def test_find_partials_missing_or_empty(tmp_path):
    with pytest.raises(MissingDirectoryError):
        find_partials(tmp_path)
    (tmp_path / "partials").mkdir()
    with pytest.raises(MissingDirectoryError):
        find_partials(tmp_path)


def test_stylesheet_entry(tmp_path):
    assert find_stylesheet_entry(tmp_path) is None

    (tmp_path / "sass").mkdir()
    with pytest.raises(MissingFileError):
        find_stylesheet_entry(tmp_path)

    write(tmp_path / "sass" / "index.scss", "body { color: red; }")
    assert find_stylesheet_entry(tmp_path) == tmp_path / "sass" / "index.scss"


def test_data_files_absent(tmp_path):
    assert find_data_files(tmp_path) is None


def test_data_files_yaml(make_project):
    root = make_project()

    data = find_data_files(root)

    assert data["nav"].format is DataFormat.YAML
    assert data["nav"].records == [
        {"label": "Home", "url": "/"},
        {"label": "Blog", "url": "/blog/"},
    ]


def test_data_files_yaml_preferred_over_json(tmp_path):
    write(tmp_path / "data" / "nav.yml", "- label: yaml\n")
    write(tmp_path / "data" / "links.json", json.dumps([{"label": "json"}]))

    data = find_data_files(tmp_path)

    assert set(data) == {"nav"}


def test_data_files_json_fallback(tmp_path):
    write(tmp_path / "data" / "links.json", json.dumps([{"label": "json", "n": 1}]))

    data = find_data_files(tmp_path)

    assert data["links"].format is DataFormat.JSON
    assert data["links"].records == [{"label": "json", "n": 1}]


def test_data_directory_without_data(tmp_path):
    write(tmp_path / "data" / "notes.txt", "")
    with pytest.raises(MissingFileError):
        find_data_files(tmp_path)


@pytest.mark.parametrize(
    "text",
    [
        "label: not a list\n",
        "- just a string\n",
        "- label: x\n  children:\n    - y\n",
        "- [unclosed\n",
    ],
)
def test_malformed_data(tmp_path, text):
    write(tmp_path / "data" / "nav.yml", text)
    with pytest.raises(MalformedDataError):
        find_data_files(tmp_path)


def test_find_content_files_skips_node_modules(make_project):
    root = make_project()
    write(root / "node_modules" / "pkg" / "README.markdown", "no front matter")

    content = find_content_files(root, make_config())

    assert all("node_modules" not in path.parts for path in content)
    assert len(content) == 5


def test_find_content_files_keeps_nested_folder_named_like_output(make_project):
    root = make_project()
    write(root / "guides" / "dist" / "setup.markdown", page("default", "Setup"))

    content = find_content_files(root, make_config())

    assert content[root / "guides" / "dist" / "setup.markdown"].url == "/guides/dist/setup/"


def test_find_layouts_rejects_undecodable_template(tmp_path):
    (tmp_path / "layouts").mkdir()
    (tmp_path / "layouts" / "post.jinja").write_bytes(b"<p>\xff\xfe</p>")

    with pytest.raises(MalformedContentError) as excinfo:
        find_layouts(tmp_path)
    assert excinfo.value.path == tmp_path / "layouts" / "post.jinja"


def test_find_partials_rejects_undecodable_template(tmp_path):
    (tmp_path / "partials").mkdir()
    (tmp_path / "partials" / "nav.jinja").write_bytes(b"\xff")

    with pytest.raises(MalformedContentError):
        find_partials(tmp_path)


def test_undecodable_data_file(tmp_path):
    (tmp_path / "data").mkdir()
    (tmp_path / "data" / "nav.yml").write_bytes(b"- label: \xff\xfe\n")

    with pytest.raises(MalformedDataError):
        find_data_files(tmp_path)


@pytest.mark.parametrize("other", ["nav.yaml", "extra/nav.yml"])
def test_data_files_sharing_a_name(tmp_path, other):
    write(tmp_path / "data" / "nav.yml", "- label: a\n")
    write(tmp_path / "data" / other, "- label: b\n")

    with pytest.raises(MalformedDataError) as excinfo:
        find_data_files(tmp_path)
    assert '"nav"' in excinfo.value.message
