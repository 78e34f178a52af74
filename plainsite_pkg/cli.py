#!/usr/bin/env python3
"""
Command-line interface for Plainsite - static site generator.
"""

import os
import sys
import argparse
import time
from typing import List, Optional

from . import __version__
from .core import Plainsite
from .errors import PlainsiteError
from .settings import PlainsiteSettings
from .template import Template

STARTER_TEMPLATE = """+<!DOCTYPE html>
+<html>
+<head>
+  <meta charset="utf-8">
+  <title>
:insert $self.title
+  </title>
+</head>
+<body>
:insert "partials/header.html"
+<main>
:insert $self.content
+</main>
+</body>
+</html>
"""

STARTER_HEADER = """<header>
  <a href="/">My Plainsite Site</a>
</header>"""

STARTER_CONTENT = """---
title: Welcome
---
<h1>Welcome to your new site</h1>
<p>Edit <code>content/index.html</code> and run <code>plainsite</code> to rebuild.</p>
"""


def write_if_missing(rel_path: str, text: str) -> None:
    """Write a starter file relative to the current directory unless it already exists."""
    path = os.path.join(os.getcwd(), rel_path)
    if os.path.exists(path):
        print(f"File already exists: {rel_path}")
        return
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(text)
    print(f"Created: {rel_path}")


def create_starter_structure() -> None:
    """Create a starter template, partial, content file and assets directory."""
    write_if_missing('template.tpl', STARTER_TEMPLATE)
    write_if_missing(os.path.join('partials', 'header.html'), STARTER_HEADER)
    write_if_missing(os.path.join('content', 'index.html'), STARTER_CONTENT)
    os.makedirs(os.path.join(os.getcwd(), 'assets'), exist_ok=True)

    print("\nStarter structure created successfully!")
    print("\nNext steps:")
    print("1. Edit the configuration file (plainsite.yml)")
    print("2. Customize template.tpl and the files in 'partials/'")
    print("3. Add your content to 'content/'")
    print("4. Run 'plainsite' to build your site")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Plainsite - Static Site Generator')
    parser.add_argument('--content', type=str,
                        help='Content directory containing the files to render')
    parser.add_argument('--template', type=str,
                        help='Template file applied to every content file')
    parser.add_argument('--output', type=str,
                        help='Output directory for generated site')
    parser.add_argument('--assets', type=str,
                        help='Assets directory to copy to output')
    parser.add_argument('--output-extension', type=str,
                        help='Extension given to rendered files (default .html)')
    parser.add_argument('--content-extensions', type=str,
                        help='Comma-separated list of content file extensions')
    parser.add_argument('--parallel-threshold', type=int,
                        help='Number of files at which rendering switches to worker processes')
    parser.add_argument('--workers', type=int,
                        help='Number of worker processes (defaults to CPU count)')
    parser.add_argument('--log-dir', type=str,
                        help='Directory for build log files')
    parser.add_argument('--check', action='store_true',
                        help='Only parse the template and report errors')
    parser.add_argument('--init', type=str, choices=['yml', 'yaml', 'json'],
                        help='Create a sample configuration file and starter project')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    # Handle init command
    if args.init:
        settings_loader = PlainsiteSettings()
        config_path = settings_loader.create_sample_config(args.init)
        print(f"Created sample configuration file: {config_path}")

        print("\nCreating starter project structure...")
        create_starter_structure()
        return

    try:
        # Load settings from configuration file
        settings_loader = PlainsiteSettings()
        settings_loader.load_settings()

        # Command line arguments take precedence
        args_dict = {k: v for k, v in vars(args).items()
                     if v is not None and k in PlainsiteSettings.DEFAULT_SETTINGS}
        final_settings = settings_loader.merge_with_args(args_dict)

        if args.check:
            template = Template.from_file(final_settings['template'])
            print(f"Template OK: {final_settings['template']} ({len(template)} lines)")
            return

        # Expand home directory if needed
        output_dir = os.path.expanduser(final_settings['output'])

        overall_start_time = time.time()

        generator = Plainsite(
            content_dir=final_settings['content'],
            template_path=final_settings['template'],
            output_dir=output_dir,
            assets_dir=final_settings['assets'],
            output_extension=final_settings['output_extension'],
            content_extensions=final_settings['content_extensions'],
            parallel_threshold=final_settings['parallel_threshold'],
            workers=final_settings['workers'],
            log_dir=final_settings['log_dir'],
        )
        result = generator.build()

        # Show build statistics
        total_time = time.time() - overall_start_time
        generator.logger.info(f"Site build completed in {total_time:.6f} seconds.")
        generator.logger.info(f"Total files rendered: {generator.files_rendered}")
        generator.logger.info(f"Total files failed: {generator.files_failed}")

    except (PlainsiteError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if not result.ok:
        sys.exit(1)


if __name__ == '__main__':
    main()
