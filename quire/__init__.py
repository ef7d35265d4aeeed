"""Quire static site generator.

Quire turns a project directory of Markdown content with YAML front matter,
Jinja2 layouts and partials, a JSON or YAML configuration and optional data
files into a directory of rendered pages, plus a sitemap, robots.txt,
copied assets and compiled Sass.

The main entry point is the CLI module, which provides commands for
compiling a project and cleaning its output directory. The pipeline itself
lives in build (orchestration), project (scanning a project into a model)
and render (turning the model into pages).
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
