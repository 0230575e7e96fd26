from rookblog.collections import Category, PostCollection
from rookblog.content import PostSummary


def make_post(slug, title=None, date="2024-01-01", tags=("intro",), description="About things"):
    return PostSummary(
        title=title or slug.title(),
        slug=slug,
        date=date,
        description=description,
        tags=tuple(tags),
        cover_image=f"/images/{slug}.png",
        reading_time_minutes=1,
    )


def sample():
    return PostCollection(
        [
            make_post("rust-tools", "Rust Tools", "2024-03-01", ("Tools", "rust")),
            make_post("deep-work", "Deep Work", "2024-02-01", ("Craft",), "Focus in long blocks"),
            make_post("markets", "Markets", "2024-01-01", ("economics", "tools")),
        ]
    )


def test_collection_sequence_protocol():
    posts = sample()
    assert len(posts) == 3
    assert posts[0].slug == "rust-tools"
    assert [p.slug for p in posts[1:]] == ["deep-work", "markets"]
    assert [p.slug for p in posts] == ["rust-tools", "deep-work", "markets"]


def test_with_tag_is_case_insensitive_exact_match():
    posts = sample()
    assert [p.slug for p in posts.with_tag("tools")] == ["rust-tools", "markets"]
    assert [p.slug for p in posts.with_tag(" TOOLS ")] == ["rust-tools", "markets"]
    assert list(posts.with_tag("tool")) == []


def test_search_matches_title_description_and_tags():
    posts = sample()
    assert [p.slug for p in posts.search("deep")] == ["deep-work"]
    assert [p.slug for p in posts.search("LONG BLOCKS")] == ["deep-work"]
    assert [p.slug for p in posts.search("economics")] == ["markets"]
    assert len(posts.search("   ")) == 3
    assert list(posts.search("nothing here")) == []


def test_filter_combines_tag_and_query():
    posts = sample()
    assert [p.slug for p in posts.filter(query="rust", tag="tools")] == ["rust-tools"]
    assert [p.slug for p in posts.filter(query="markets", tag="craft")] == []
    assert [p.slug for p in posts.filter(tag="craft")] == ["deep-work"]


def test_latest_and_categories():
    posts = sample()
    assert [p.slug for p in posts.latest(2)] == ["rust-tools", "deep-work"]
    assert len(PostCollection([make_post(f"p{i}") for i in range(8)]).latest()) == 6

    categories = PostCollection(
        [
            make_post("a", tags=("python", "web")),
            make_post("b", tags=("python", "Art")),
            make_post("c", tags=("web", "zen")),
        ]
    ).categories()
    assert categories == [
        Category("python", 2),
        Category("web", 2),
        Category("Art", 1),
        Category("zen", 1),
    ]
    assert PostCollection([]).categories() == []
