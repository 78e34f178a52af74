"""Test configuration and fixtures for Plainsite tests."""

import pytest
import tempfile
import shutil
import os
from pathlib import Path

from plainsite_pkg.evaluator import EvaluationContext


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def make_context():
    """Build an EvaluationContext with sensible defaults."""
    def _make(template_path='templates/t.tpl', content_path='content/page.md',
              content_text='', title='Untitled'):
        return EvaluationContext(
            template_path=template_path,
            content_path=content_path,
            content_text=content_text,
            title=title,
        )
    return _make


@pytest.fixture
def mock_site(temp_dir):
    """Create a template, a partial and a small content tree."""
    root = Path(temp_dir)

    templates_dir = root / 'templates'
    (templates_dir / 'partials').mkdir(parents=True)
    (templates_dir / 'partials' / 'nav.html').write_text('<nav>NAV</nav>')
    (templates_dir / 'site.tpl').write_text(
        "+<html><title>\n"
        ":insert $self.title\n"
        "+</title>\n"
        ":insert \"partials/nav.html\"\n"
        ":insert $self.content\n"
        "+</html>\n"
    )

    content_dir = root / 'content'
    (content_dir / 'blog').mkdir(parents=True)
    (content_dir / 'index.md').write_text("---\ntitle: Home\n---\n<p>Welcome</p>")
    (content_dir / 'about-us.txt').write_text("<p>About</p>")
    (content_dir / 'blog' / 'first_post.md').write_text("---\nauthor: me\n---\n<p>First</p>")
    (content_dir / 'notes.rst').write_text("ignored")

    assets_dir = root / 'assets'
    (assets_dir / 'css').mkdir(parents=True)
    (assets_dir / 'css' / 'site.css').write_text('body { margin: 0; }')

    return {
        'root': str(root),
        'template': str(templates_dir / 'site.tpl'),
        'content': str(content_dir),
        'assets': str(assets_dir),
        'output': os.path.join(str(root), 'output'),
    }
