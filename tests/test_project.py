import json
import logging

import pytest

from quire.errors import ConfigNotFoundError, MissingDirectoryError
from quire.project import assemble_project

from conftest import write, write_project


def test_assemble_project(make_project):
    root = make_project()

    model = assemble_project(root)

    assert model.root == root
    assert model.config.title == "Example"
    assert model.output_dir == root / "dist"
    assert len(model.content_files) == 5
    assert [r.params["title"] for r in model.loop_content["posts"]] == ["First", "Second"]
    assert set(model.layout_index) == {"default", "listing", "post"}
    assert model.partials == {"header": "<header>{{ site.title }}</header>"}
    assert model.stylesheet is None
    assert model.clean_data() == {
        "nav": [{"label": "Home", "url": "/"}, {"label": "Blog", "url": "/blog/"}]
    }


def test_assemble_without_data_directory(make_project):
    root = make_project()
    (root / "data" / "nav.yml").unlink()
    (root / "data").rmdir()

    model = assemble_project(root)

    assert model.data_files is None
    assert model.clean_data() is None


def test_assemble_fails_on_config_first(tmp_path):
    write(tmp_path / "index.markdown", "no front matter")

    with pytest.raises(ConfigNotFoundError):
        assemble_project(tmp_path)


def test_assemble_propagates_missing_layouts(make_project):
    root = make_project()
    for path in (root / "layouts").iterdir():
        path.unlink()

    with pytest.raises(MissingDirectoryError):
        assemble_project(root)


def test_layout_index_first_duplicate_wins(make_project, caplog):
    root = make_project()
    write(root / "layouts" / "a" / "post.jinja", "nested")

    model = assemble_project(root)
    with caplog.at_level(logging.WARNING, logger="quire.project"):
        index = model.layout_index

    assert index["post"].path == root / "layouts" / "a" / "post.jinja"
    assert "shadowed" in caplog.text


def test_model_reflects_disk_at_assembly_time(make_project):
    root = make_project()
    model = assemble_project(root)

    config = json.loads((root / "config.json").read_text())
    config["title"] = "Changed"
    (root / "config.json").write_text(json.dumps(config))

    assert model.config.title == "Example"
    assert assemble_project(root).config.title == "Changed"


def test_urls_ignore_output_name_above_project(tmp_path):
    root = write_project(tmp_path / "dist" / "site")

    model = assemble_project(root)

    urls = sorted(record.url for record in model.content_files.values())
    assert urls == ["/", "/about/", "/blog/", "/posts/first/", "/posts/second/"]
    assert model.loop_content["posts"][0].url == "/posts/first/"
