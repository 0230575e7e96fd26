import json

from rookblog.content import Post, PostSummary
from rookblog.metadata import blog_posting_schema, home_metadata, json_ld, post_metadata
from rookblog.templates import TemplateEngine, share_links

CONFIG = {
    "site_name": "blog.example.com",
    "site_description": "Posts from blog.example.com",
    "site_url": "https://blog.example.com",
    "author": {
        "name": "Ada Writer",
        "role": "Editor",
        "bio": "Writes about tools.",
        "avatar": "/images/ada.png",
    },
}


def make_summary(slug, title="Hello", date="2024-01-05", tags=("intro",)):
    return PostSummary(
        title=title,
        slug=slug,
        date=date,
        description=f"About {title}",
        tags=tuple(tags),
        cover_image=f"/images/{slug}.png",
        reading_time_minutes=3,
    )


def make_post(slug="hello", title="Hello", html="<p>Body <strong>html</strong></p>"):
    summary = make_summary(slug, title)
    return Post(
        **{name: getattr(summary, name) for name in PostSummary.__dataclass_fields__},
        content="Body **html**",
        html=html,
    )


def test_home_lists_latest_six_without_filters():
    posts = [make_summary(f"p{i}", f"Post {i}", tags=("tools",)) for i in range(8)]
    html = TemplateEngine(CONFIG).render_home(posts)

    assert html.count('class="postCard"') == 6
    assert 'href="/posts/p0"' in html
    assert "Post 6" not in html
    assert "Showing" not in html
    assert "<title>blog.example.com</title>" in html
    assert 'class="ctaButton" href="/posts/p0"' in html
    assert "January 5, 2024" in html
    assert "Ada Writer" in html
    assert '<link rel="canonical" href="https://blog.example.com/">' in html
    assert '<meta property="og:image" content="/images/p0.png">' in html


def test_home_filters_by_tag_and_query():
    posts = [
        make_summary("a", "Rust Tools", tags=("Tools",)),
        make_summary("b", "Python Tools", tags=("tools", "python")),
        make_summary("c", "Essays", tags=("writing",)),
    ]
    engine = TemplateEngine(CONFIG)

    html = engine.render_home(posts, query="", tag="tools")
    assert html.count('class="postCard"') == 2
    assert "Showing 2 results in tools." in html
    assert 'class="filterClear"' in html
    assert 'class="categoryChip isActive" href="/?tag=Tools"' in html

    html = engine.render_home(posts, query=" rust ", tag="tools")
    assert html.count('class="postCard"') == 1
    assert "Showing 1 result in tools." in html
    assert 'value="rust"' in html
    assert 'href="/?q=rust&amp;tag=writing"' in html


def test_home_empty_state():
    html = TemplateEngine(CONFIG).render_home([])
    assert "No posts found in content/posts yet." in html
    assert "No categories yet." in html
    assert 'class="ctaButton" href="/"' in html
    assert "og:image" not in html


def test_home_escapes_post_text():
    html = TemplateEngine(CONFIG).render_home([make_summary("x", "<script>alert(1)</script>")])
    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;" in html


def test_post_page():
    post = make_post(title="Tools & Craft")
    html = TemplateEngine(CONFIG).render_post(post)

    assert "<title>Tools &amp; Craft | blog.example.com</title>" in html
    assert "<p>Body <strong>html</strong></p>" in html
    assert "By Ada Writer | January 5, 2024" in html
    assert "3 min read" in html
    assert '<li class="tag">intro</li>' in html
    assert '<script type="application/ld+json">' in html
    assert '<meta property="og:type" content="article">' in html
    assert '<meta property="article:published_time" content="2024-01-05T00:00:00.000Z">' in html
    assert "https://twitter.com/intent/tweet?text=Tools%20%26%20Craft" in html


def test_not_found_page():
    html = TemplateEngine(CONFIG).render_not_found()
    assert "<title>Post Not Found | blog.example.com</title>" in html
    assert "The requested post could not be found." in html


def test_project_templates_override_bundled_layouts(tmp_path):
    (tmp_path / "404.html").write_text("custom {{ meta.title }}", encoding="utf-8")
    html = TemplateEngine(CONFIG, tmp_path).render_not_found()
    assert html == "custom Post Not Found | blog.example.com"
    # Missing override directories fall back to the bundled layouts
    assert "Back to all posts" in TemplateEngine(CONFIG, tmp_path / "nope").render_not_found()


def test_metadata_builders():
    summary = make_summary("hello")
    home = home_metadata([summary], CONFIG)
    assert home.title == "blog.example.com"
    assert home.og_image == "/images/hello.png"
    assert home.og_image_alt == "blog.example.com"
    assert home_metadata([], CONFIG).og_image is None

    meta = post_metadata(summary, CONFIG)
    assert meta.title == "Hello | blog.example.com"
    assert meta.canonical == "/posts/hello"
    assert meta.og_type == "article"
    assert meta.og_image_alt == "Cover image for Hello"
    assert meta.published_time == "2024-01-05T00:00:00.000Z"
    assert meta.tags == ("intro",)

    missing = post_metadata(None, CONFIG)
    assert missing.title == "Post Not Found | blog.example.com"
    assert missing.canonical is None


def test_blog_posting_schema():
    schema = blog_posting_schema(make_post(), CONFIG)
    assert schema["@type"] == "BlogPosting"
    assert schema["url"] == "https://blog.example.com/posts/hello"
    assert schema["image"] == "https://blog.example.com/images/hello.png"
    assert schema["author"] == {"@type": "Person", "name": "Ada Writer"}
    assert schema["keywords"] == "intro"
    assert schema["datePublished"] == schema["dateModified"] == "2024-01-05T00:00:00.000Z"

    encoded = json_ld({"headline": "</script><b>"})
    assert "</script>" not in encoded
    assert json.loads(encoded) == {"headline": "</script><b>"}


def test_share_links():
    links = dict(share_links(make_summary("hello"), CONFIG))
    assert links["Facebook"] == (
        "https://www.facebook.com/sharer/sharer.php?u=https%3A%2F%2Fblog.example.com%2Fposts%2Fhello"
    )
    assert set(links) == {"X", "Facebook", "LinkedIn"}
