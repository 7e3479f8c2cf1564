import os
from pathlib import Path

import pytest

from stationery.assets import AssetList, AssetPipeline
from stationery.build import BuildError, BuildResult, _format_error_message, build_site
from stationery.config import load_config
from stationery.extractors import FrontMatterError

MTIME = 1500000000


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    os.utime(path, (MTIME, MTIME))
    return path


def create_project(tmp_path: Path, config: str = "") -> Path:
    project = tmp_path
    write(
        project / ".station.yml",
        config
        or "source: src\noutput: out\ntitle: Log\nname: Jane\nemail: jane@example.com\n"
        "assets:\n  css:\n    - style.css\n",
    )
    write(project / "assets" / "css" / "style.css", "body { color: black; }")
    write(
        project / "src" / "zomg.md",
        "\n---\ntitle: zomg is a thing\ntimestamp: 2018-03-01\ntags:\n  - foo\n  - bar\n---\n\n"
        '# zomg\n{{ timestamp("2018-03-24T12:43:03") }}\n\nthis is my temp post!',
    )
    write(
        project / "src" / "two.md",
        "\n---\ntitle: my second post\ntimestamp: 2018-06-01\ntags:\n  - bar\n---\n\n# two\n\nwow, so easy!",
    )
    write(
        project / "src" / "three.md",
        "---\ntimestamp: 2018-01-01\n---\n# three\n\nlook, i have no data!",
    )
    write(project / "src" / "boom.wtf", "# boom\n\nthis file should be ignored!")
    return project


def read(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def test_asset_pipeline_copies_listed_files(tmp_path):
    write(tmp_path / "assets" / "css" / "a.css", "a")
    write(tmp_path / "assets" / "images" / "logo.png", "png")
    write(tmp_path / "assets" / "css" / "unlisted.css", "x")
    output = tmp_path / "out"

    written = AssetPipeline(
        tmp_path, output, AssetList(css=("a.css",), images=("logo.png",))
    ).run()
    assert written == [output / "css" / "a.css", output / "images" / "logo.png"]
    assert read(output / "css" / "a.css") == "a"
    assert not (output / "css" / "unlisted.css").exists()
    assert not (output / "js").exists()

    assert AssetPipeline(tmp_path, output, None).run() == []


def test_asset_pipeline_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        AssetPipeline(tmp_path, tmp_path / "out", AssetList(css=("gone.css",))).run()


def test_build_site_writes_pages(tmp_path, capsys):
    project = create_project(tmp_path)
    result = build_site(project)
    out = project / "out"

    assert isinstance(result, BuildResult)
    assert result.output_dir == out
    assert [p.slug for p in result.pages] == ["two", "zomg", "three"]

    page = read(out / "zomg.html")
    assert "<h1>zomg</h1>" in page
    assert "<title>zomg is a thing</title>" in page
    assert "title: zomg is a thing" not in page
    assert '<a href="#2018-03-24T12:43:03">@ 2018-03-24T12:43:03</a>' in page
    assert '<link type="text/css" rel="stylesheet" href="css/style.css">' in page
    assert "<title>three</title>" in read(out / "three.html")

    assert not (out / "boom.html").exists()
    assert read(out / "css" / "style.css") == "body { color: black; }"

    printed = capsys.readouterr().out
    assert f"Wrote: {out / 'zomg.html'}" in printed
    assert f"Wrote: {out / 'index.rss'}" in printed
    assert f"Wrote: {out / 'tag' / 'bar.html'}" in printed


def test_build_site_index_is_newest_first(tmp_path):
    project = create_project(tmp_path)
    build_site(project)
    out = (project / "out").resolve().as_posix()
    index = read(project / "out" / "index.html")

    assert '<div id="index">' in index
    links = [
        f'<a href="{out}/two.html">my second post</a>',
        f'<a href="{out}/zomg.html">zomg is a thing</a>',
        f'<a href="{out}/three.html">three</a>',
    ]
    positions = [index.index(link) for link in links]
    assert positions == sorted(positions)
    assert "2018-06-01" in index


def test_build_site_tag_pages(tmp_path):
    project = create_project(tmp_path)
    result = build_site(project)
    out = (project / "out").resolve().as_posix()

    assert list(result.tags) == ["bar", "foo"]
    bar = read(project / "out" / "tag" / "bar.html")
    assert f'<a href="{out}/zomg.html">zomg is a thing</a>' in bar
    assert f'<a href="{out}/two.html">my second post</a>' in bar
    assert bar.index("my second post") < bar.index("zomg is a thing")
    assert 'href="../css/style.css"' in bar

    foo = read(project / "out" / "tag" / "foo.html")
    assert "zomg is a thing" in foo
    assert "my second post" not in foo
    assert not (project / "out" / "tag" / "three.html").exists()


def test_build_site_rss_matches_index_order(tmp_path):
    project = create_project(tmp_path)
    build_site(project)
    rss = read(project / "out" / "index.rss")

    assert rss.count("<item>") == 3
    titles = ["my second post", "zomg is a thing", "three"]
    positions = [rss.index(f"<title>{title}</title>") for title in titles]
    assert positions == sorted(positions)
    assert "<author>jane@example.com (Jane)</author>" in rss


def test_build_site_with_site_url(tmp_path):
    project = create_project(
        tmp_path,
        "source: src\noutput: out\nsite-url: https://example.com/log\n",
    )
    build_site(project)
    index = read(project / "out" / "index.html")
    assert '<a href="https://example.com/log/zomg.html">zomg is a thing</a>' in index
    assert 'href="https://example.com/log/tag/foo.html"' in index
    assert "<link>https://example.com/log/two.html</link>" in read(project / "out" / "index.rss")


def test_build_site_is_idempotent(tmp_path):
    project = create_project(tmp_path)
    out = project / "out"

    build_site(project)
    first = {p.relative_to(out): p.read_bytes() for p in out.rglob("*") if p.is_file()}
    build_site(project, clean_output=True)
    second = {p.relative_to(out): p.read_bytes() for p in out.rglob("*") if p.is_file()}

    assert first == second
    assert Path("index.html") in first
    assert Path("tag/foo.html") in first


def test_build_site_single_file_source(tmp_path):
    project = create_project(tmp_path, "source: src.md\noutput: out\n")
    write(project / "src.md", "---\ntitle: log of all zomg\n---\n\n# zomg all the things\n")
    result = build_site(project)

    page = read(project / "out" / "src.html")
    assert "<h1>zomg all the things</h1>" in page
    assert "<title>log of all zomg</title>" in page
    assert [p.slug for p in result.pages] == ["src"]
    assert not (project / "out" / "tag").exists()


def test_build_site_custom_layouts(tmp_path):
    project = create_project(
        tmp_path,
        "source: src\noutput: out\nlayout: layouts/page.html\nindex-layout: layouts/index.html\n",
    )
    write(project / "layouts" / "page.html", "<article>{{ page.content }}</article>")
    write(project / "layouts" / "index.html", "<main>{{ page.content }}</main>")
    build_site(project)

    assert read(project / "out" / "two.html").startswith("<article><h1>two</h1>")
    assert read(project / "out" / "index.html").startswith('<main><div id="index">')
    assert read(project / "out" / "tag" / "bar.html").startswith('<main><div id="index">')


def test_build_site_output_override(tmp_path):
    project = create_project(tmp_path)
    result = build_site(project, output_dir_override=tmp_path / "elsewhere")
    assert result.output_dir == tmp_path / "elsewhere"
    assert (tmp_path / "elsewhere" / "index.html").exists()
    assert not (project / "out").exists()


def test_build_site_accepts_explicit_config(tmp_path):
    project = create_project(tmp_path)
    config = load_config(project)
    result = build_site(project, config=config)
    assert len(result.pages) == 3


def test_malformed_front_matter_aborts(tmp_path):
    project = create_project(tmp_path)
    bad = write(project / "src" / "bad.md", "---\ntitle: [broken\n---\nbody")
    with pytest.raises(BuildError) as excinfo:
        build_site(project)
    assert excinfo.value.source_path == bad
    assert isinstance(excinfo.value.original_error, FrontMatterError)
    assert not (project / "out" / "index.html").exists()


def test_body_template_error_aborts(tmp_path):
    project = create_project(tmp_path)
    bad = write(project / "src" / "bad.md", "# hi\n\n{% if %}")
    with pytest.raises(BuildError) as excinfo:
        build_site(project)
    assert excinfo.value.source_path == bad
    assert "Template syntax error" in excinfo.value.message


def test_missing_layout_aborts(tmp_path):
    project = create_project(tmp_path, "source: src\noutput: out\nlayout: nope.html\n")
    with pytest.raises(BuildError) as excinfo:
        build_site(project)
    assert excinfo.value.message.startswith("File not found")


def test_missing_source_and_asset_abort(tmp_path):
    project = create_project(tmp_path, "source: missing\noutput: out\n")
    with pytest.raises(BuildError) as excinfo:
        build_site(project)
    assert excinfo.value.source_path == project / "missing"

    project = create_project(tmp_path, "source: src\noutput: out\nassets:\n  css: [gone.css]\n")
    with pytest.raises(BuildError):
        build_site(project)


def test_bad_config_aborts(tmp_path):
    project = create_project(tmp_path, "- not\n- a mapping\n")
    with pytest.raises(BuildError) as excinfo:
        build_site(project)
    assert excinfo.value.source_path == project / ".station.yml"


def test_format_error_message():
    assert _format_error_message(ValueError("bad")) == "ValueError: bad"
    assert _format_error_message(FileNotFoundError(2, "No such file", "x.html")) == "File not found: x.html"


META_CONFIG = (
    "source: src\noutput: out\ntitle: my blog\ndescription: my default description\n"
    "twitter: aedipamoss\nimage: images/avatar.jpg\n"
)


def test_index_and_tag_pages_use_site_metadata(tmp_path):
    write(tmp_path / ".station.yml", META_CONFIG)
    write(tmp_path / "src" / "config.md", "\n---\ntitle: config inherited defaults!\ntags:\n  - mytag\n---\n\nthis is config!")
    build_site(tmp_path)
    image = (tmp_path / "out" / "images" / "avatar.jpg").resolve().as_posix()

    index = read(tmp_path / "out" / "index.html")
    assert "<title>my blog</title>" in index
    assert '<meta name="description" content="my default description">' in index
    assert '<meta property="og:description" content="my default description">' in index
    assert '<meta property="og:title" content="my blog">' in index
    assert f'<meta property="og:image" content="{image}">' in index
    assert '<meta name="twitter:card" content="summary">' in index
    assert '<meta name="twitter:creator" content="@aedipamoss">' in index
    assert '<meta name="twitter:site" content="@aedipamoss">' in index

    tag = read(tmp_path / "out" / "tag" / "mytag.html")
    assert '<meta property="og:title" content="my blog">' in tag
    assert f'<meta property="og:image" content="{image}">' in tag


def test_pages_inherit_site_metadata(tmp_path):
    write(tmp_path / ".station.yml", META_CONFIG)
    write(tmp_path / "src" / "config.md", "\n---\ntitle: config inherited defaults!\n---\n\nthis is config!")
    build_site(tmp_path)
    page = read(tmp_path / "out" / "config.html")

    assert "<title>config inherited defaults!</title>" in page
    assert '<meta name="description" content="my default description">' in page
    assert '<meta property="og:title" content="config inherited defaults!">' in page
    assert '<meta name="twitter:creator" content="@aedipamoss">' in page


def test_front_matter_overrides_site_metadata(tmp_path):
    write(tmp_path / ".station.yml", META_CONFIG)
    write(
        tmp_path / "src" / "overide.md",
        "\n---\ntitle: config overridden!\ntwitter: forgetme\nimage: images/zomg.jpg\n"
        "description: description overridden!\n---\n\nthis is overridden!",
    )
    build_site(tmp_path)
    page = read(tmp_path / "out" / "overide.html")
    image = (tmp_path / "out" / "images" / "zomg.jpg").resolve().as_posix()

    assert '<meta name="description" content="description overridden!">' in page
    assert '<meta property="og:description" content="description overridden!">' in page
    assert '<meta property="og:title" content="config overridden!">' in page
    assert f'<meta property="og:image" content="{image}">' in page
    assert '<meta name="twitter:creator" content="@forgetme">' in page
    assert '<meta name="twitter:site" content="@forgetme">' in page
    assert "aedipamoss" not in page


def test_tag_outside_output_directory_aborts(tmp_path):
    write(tmp_path / ".station.yml", "source: src\noutput: site/out\n")
    bad = write(tmp_path / "src" / "post.md", "---\ntags: ['../../escaped']\n---\nbody")
    with pytest.raises(BuildError) as excinfo:
        build_site(tmp_path)
    assert excinfo.value.source_path == bad
    assert isinstance(excinfo.value.original_error, FrontMatterError)
    assert not (tmp_path / "site" / "escaped.html").exists()
    assert not (tmp_path / "escaped.html").exists()
