"""Rookblog static blog.

This package reads Markdown posts with YAML front matter from a content directory,
validates them, converts their bodies to HTML and renders a small blog: a home feed,
one page per post, and RSS/sitemap/robots feeds.

The main entry point is the CLI module, which provides commands for building the
static export, running the development server, validating posts and creating new ones.

Modules:
- content: Post discovery, parsing and collection assembly.
- validators: Front matter extraction and field validation.
- renderers: Markdown to HTML conversion.
- feeds, templates, metadata: Presentation of parsed posts.
- build, server, cli: Static export, development server and command line.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
