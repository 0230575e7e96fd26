import asyncio

from rookblog.renderers import MarkdownRenderer, _generate_heading_id, pygments_css, render_html


def render(text: str) -> str:
    return asyncio.run(render_html(text))


def test_block_and_inline_constructs():
    html = render(
        "# Title\n\n"
        "Some *em* and **strong** text with `code` and a [link](https://example.com).\n\n"
        "- one\n- two\n\n"
        "1. first\n2. second\n\n"
        "> quoted\n\n"
        "![Alt text](/images/pic.png)\n"
    )
    assert '<h1 id="title">Title</h1>' in html
    assert "<em>em</em>" in html
    assert "<strong>strong</strong>" in html
    assert "<code>code</code>" in html
    assert '<a href="https://example.com">link</a>' in html
    assert "<ul>" in html and "<li>one</li>" in html
    assert "<ol>" in html and "<li>second</li>" in html
    assert "<blockquote>" in html
    assert '<img src="/images/pic.png" alt="Alt text"' in html


def test_heading_ids_are_unique_per_document():
    html = render("## Setup\n\n## Setup\n\n## Setup\n")
    assert 'id="setup"' in html
    assert 'id="setup-1"' in html
    assert 'id="setup-2"' in html
    # A fresh render starts counting again
    assert 'id="setup"' in MarkdownRenderer().render("## Setup\n")


def test_code_blocks():
    highlighted = render("```python\nprint('hi')\n```\n")
    assert 'class="highlight"' in highlighted

    unknown = render("```nosuchlang\na < b\n```\n")
    assert '<pre><code class="language-nosuchlang">a &lt; b' in unknown

    plain = render("```\nx & y\n```\n")
    assert "<pre><code>x &amp; y" in plain


def test_raw_html_passes_through():
    html = render('<div class="note"><span>kept</span></div>\n')
    assert '<div class="note"><span>kept</span></div>' in html


def test_extensions_and_empty_input():
    html = render("~~gone~~\n\n| a | b |\n|---|---|\n| 1 | 2 |\n")
    assert "<del>gone</del>" in html
    assert "<table>" in html
    assert render("").strip() == ""


def test_heading_id_generation():
    assert _generate_heading_id("Hello, World!") == "hello-world"
    assert _generate_heading_id("Use <code>pip</code> now") == "use-pip-now"
    assert ".highlight" in pygments_css()
