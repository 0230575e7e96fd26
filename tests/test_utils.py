from datetime import datetime, timezone
from pathlib import Path

from rookblog import html_utils, utils


def test_reading_time_and_word_count():
    assert utils.count_words("  one\ttwo\n\nthree  ") == 3
    assert utils.count_words("") == 0
    assert utils.calculate_reading_time("") == 1
    assert utils.calculate_reading_time("word " * 225) == 1
    assert utils.calculate_reading_time("word " * 226) == 2
    assert utils.calculate_reading_time("word " * 10, words_per_minute=5) == 2


def test_date_helpers():
    midnight = utils.utc_midnight("2024-01-05")
    assert midnight == datetime(2024, 1, 5, tzinfo=timezone.utc)
    assert utils.iso_timestamp(midnight) == "2024-01-05T00:00:00.000Z"
    assert (
        utils.iso_timestamp(datetime(2024, 1, 5, 12, 30, 1, 250000, tzinfo=timezone.utc))
        == "2024-01-05T12:30:01.250Z"
    )
    assert utils.http_date(midnight) == "Fri, 05 Jan 2024 00:00:00 GMT"
    assert utils.format_date("2024-01-05") == "January 5, 2024"
    assert utils.format_date("2023-12-31") == "December 31, 2023"


def test_slugify():
    assert utils.slugify("Hello, World!") == "hello-world"
    assert utils.slugify("  Already-a-slug ") == "already-a-slug"
    assert utils.slugify("!!!") == ""


def test_is_markdown():
    assert utils.is_markdown(Path("post.md"))
    assert not utils.is_markdown(Path("post.MD"))
    assert not utils.is_markdown(Path("post.markdown"))
    assert not utils.is_markdown(Path("post.md.bak"))


def test_ensure_clean_dir_and_copy_tree(tmp_path):
    target = tmp_path / "build"
    target.mkdir()
    (target / "old.txt").write_text("old", encoding="utf-8")
    utils.ensure_clean_dir(target)
    assert list(target.iterdir()) == []

    missing = tmp_path / "missing-dir"
    utils.ensure_clean_dir(missing)
    assert missing.exists()

    public = tmp_path / "public"
    (public / "images").mkdir(parents=True)
    (public / "images" / "cover.png").write_bytes(b"png")
    (public / "styles.css").write_text("body{}", encoding="utf-8")
    written = utils.copy_tree(public, target)
    assert sorted(p.relative_to(target).as_posix() for p in written) == [
        "images/cover.png",
        "styles.css",
    ]
    assert (target / "images" / "cover.png").read_bytes() == b"png"
    assert utils.copy_tree(tmp_path / "nope", target) == []


def test_html_helpers():
    assert html_utils.escape_xml("<a href=\"x\">Tom & Jerry's</a>") == (
        "&lt;a href=&quot;x&quot;&gt;Tom &amp; Jerry&apos;s&lt;/a&gt;"
    )
    assert html_utils.join_root_url("https://example.com/", "/posts/a") == (
        "https://example.com/posts/a"
    )
    assert html_utils.join_root_url("", "/posts/a") == "/posts/a"
    assert html_utils.build_query({"q": "", "tag": "Deep Work"}) == "?tag=Deep+Work"
    assert html_utils.build_query({"q": "rust", "tag": "tools"}) == "?q=rust&tag=tools"
    assert html_utils.build_query({"q": "  ", "tag": None}) == ""
