import os
import re
import shutil
import logging
import yaml
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Tuple
from concurrent.futures import ProcessPoolExecutor, as_completed

from .errors import PlainsiteError
from .evaluator import EvaluationContext, read_file_text
from .template import Template

DEFAULT_CONTENT_EXTENSIONS = ('.md', '.txt', '.html')

FRONT_MATTER = re.compile(r'\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)', re.DOTALL | re.MULTILINE)

# Set in each worker process by initializer()
file_processor = None


def initializer(template, template_path, content_dir, output_dir, output_extension):
    """Initialize a FileProcessor for each worker process."""
    global file_processor
    file_processor = FileProcessor(template, template_path, content_dir, output_dir, output_extension)


def process_file(file_path):
    """Render a content file with the worker's FileProcessor."""
    return file_processor.process(file_path)


def title_from_filename(file_path):
    """Derive a display title from a content file name."""
    stem = os.path.splitext(os.path.basename(file_path))[0]
    words = re.split(r'[-_\s]+', stem)
    return ' '.join(word.capitalize() for word in words if word) or stem


class FileProcessor:
    def __init__(self, template, template_path, content_dir, output_dir, output_extension='.html'):
        self.template = template
        self.template_path = template_path
        self.content_dir = content_dir
        self.output_dir = output_dir
        self.output_extension = output_extension
        self.logger = logging.getLogger('FileProcessor')

    def split_front_matter(self, text, filepath=None):
        """Split optional YAML front matter off the top of a content file."""
        match = FRONT_MATTER.match(text)
        if not match:
            return {}, text

        try:
            metadata = yaml.safe_load(match.group(1)) or {}
        except yaml.YAMLError as e:
            self.logger.warning(f"Invalid YAML front matter in {filepath}: {e}")
            return {}, text

        if not isinstance(metadata, dict):
            self.logger.warning(f"Ignoring front matter in {filepath}: expected a mapping")
            return {}, text

        return metadata, text[match.end():]

    def build_context(self, file_path):
        """Read a content file and build the context it is rendered against."""
        text = read_file_text(file_path)
        metadata, body = self.split_front_matter(text, file_path)
        title = metadata.get('title')
        if not isinstance(title, str):
            title = title_from_filename(file_path)
        return EvaluationContext(
            template_path=self.template_path,
            content_path=file_path,
            content_text=body,
            title=title,
        )

    def output_path_for(self, file_path):
        """Mirror a content file's location under the output directory."""
        rel_path = os.path.relpath(file_path, self.content_dir)
        base, _ = os.path.splitext(rel_path)
        return os.path.join(self.output_dir, base + self.output_extension)

    def process(self, file_path):
        """Render a single content file and write it out. Returns the output path."""
        context = self.build_context(file_path)
        rendered = self.template.render(context)

        output_file_path = self.output_path_for(file_path)
        os.makedirs(os.path.dirname(output_file_path), exist_ok=True)
        with open(output_file_path, 'w', encoding='utf-8', newline='') as output_file:
            output_file.write(rendered)
        self.logger.debug(f"Rendered {file_path} -> {output_file_path}")
        return output_file_path


@dataclass
class BuildResult:
    rendered: List[str] = field(default_factory=list)
    failed: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def ok(self):
        return not self.failed


class InfoFilter(logging.Filter):
    """Filter to allow only selected INFO messages to be shown in the console."""
    def filter(self, record):
        if record.levelno >= logging.WARNING:
            return True
        allowed_messages = [
            "Site build completed in",
            "Total files rendered:",
            "Total files failed:",
            "Using multiprocessing for",
            "Using single-threaded processing for",
            "Copied assets from",
        ]
        return any(msg in record.getMessage() for msg in allowed_messages)


class Plainsite:
    def __init__(self, content_dir='content', template_path='template.tpl', output_dir='output',
                 assets_dir=None, output_extension='.html', content_extensions=DEFAULT_CONTENT_EXTENSIONS,
                 parallel_threshold=12, workers=None, log_dir='logs'):
        self.content_dir = content_dir
        self.template_path = template_path
        self.output_dir = output_dir
        self.assets_dir = assets_dir
        if not output_extension.startswith('.'):
            output_extension = '.' + output_extension
        self.output_extension = output_extension
        self.content_extensions = tuple(ext.lower() if ext.startswith('.') else '.' + ext.lower()
                                        for ext in content_extensions)
        self.parallel_threshold = max(1, parallel_threshold)
        self.workers = workers
        self.log_dir = log_dir
        self.files_rendered = 0
        self.files_failed = 0
        self.template = None

        self.setup_logging()

    def setup_logging(self):
        """Set up logging configuration."""
        self.logger = logging.getLogger('Plainsite')
        self.logger.setLevel(logging.DEBUG)

        if not self.logger.handlers:
            # Console handler with filter
            console_handler = logging.StreamHandler()
            console_handler.setLevel(logging.INFO)
            console_handler.addFilter(InfoFilter())
            console_formatter = logging.Formatter('%(message)s')
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

            # File handler for all logs
            if self.log_dir:
                os.makedirs(self.log_dir, exist_ok=True)
                log_filename = datetime.now().strftime('plainsite_%Y-%m-%d_%H-%M-%S.log')
                log_filepath = os.path.join(self.log_dir, log_filename)

                file_handler = logging.FileHandler(log_filepath, encoding='utf-8')
                file_handler.setLevel(logging.DEBUG)
                file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
                file_handler.setFormatter(file_formatter)
                self.logger.addHandler(file_handler)

    def create_output_dir(self):
        os.makedirs(self.output_dir, exist_ok=True)

    def copy_assets_to_output(self):
        """Copy the assets directory to <output>/assets, replacing any previous copy."""
        if not self.assets_dir:
            return
        if not os.path.isdir(self.assets_dir):
            self.logger.warning(f"Assets directory not found: {self.assets_dir}")
            return

        output_assets_dir = os.path.join(self.output_dir, 'assets')
        try:
            if os.path.exists(output_assets_dir):
                shutil.rmtree(output_assets_dir)
            shutil.copytree(self.assets_dir, output_assets_dir)
            self.logger.info(f"Copied assets from {self.assets_dir}")
        except (IOError, OSError, PermissionError) as e:
            self.logger.error(f"Failed to copy assets from {self.assets_dir}: {e}")

    def load_template(self):
        """Parse the template once; errors here are fatal to the whole build."""
        self.template = Template.from_file(self.template_path)
        self.logger.debug(f"Loaded template {self.template_path} ({len(self.template)} lines)")
        return self.template

    def get_content_files(self):
        """Get all content files below the content directory, in sorted order."""
        content_files = []
        if not os.path.isdir(self.content_dir):
            self.logger.warning(f"Content directory not found: {self.content_dir}")
            return content_files

        output_root = os.path.abspath(self.output_dir)
        for root, dirs, files in os.walk(self.content_dir):
            dirs[:] = sorted(d for d in dirs if os.path.abspath(os.path.join(root, d)) != output_root)
            for file in sorted(files):
                if file.lower().endswith(self.content_extensions):
                    content_files.append(os.path.join(root, file))
        return content_files

    def create_file_processor(self):
        return FileProcessor(self.template, self.template_path, self.content_dir,
                             self.output_dir, self.output_extension)

    def render_file(self, file_path):
        """Render one content file against the loaded template."""
        if self.template is None:
            self.load_template()
        return self.create_file_processor().process(file_path)

    def build_files(self, content_files):
        """Render content files using adaptive processing based on workload size."""
        result = BuildResult()
        if not content_files:
            self.logger.warning("No content files found to process.")
            return result

        total_files = len(content_files)
        if total_files >= self.parallel_threshold:
            self.logger.info(f"Using multiprocessing for {total_files} files with {self.workers or os.cpu_count()} workers")
            self._build_with_multiprocessing(content_files, result)
        else:
            self.logger.info(f"Using single-threaded processing for {total_files} files")
            self._build_single_threaded(content_files, result)

        self.files_rendered += len(result.rendered)
        self.files_failed += len(result.failed)
        return result

    def _record_failure(self, result, file_path, error):
        self.logger.error(f"Error rendering {file_path}: {error}")
        result.failed.append((file_path, str(error)))

    def _build_single_threaded(self, content_files, result):
        processor = self.create_file_processor()
        for file_path in content_files:
            try:
                result.rendered.append(processor.process(file_path))
            except (PlainsiteError, OSError) as e:
                self._record_failure(result, file_path, e)

    def _build_with_multiprocessing(self, content_files, result):
        with ProcessPoolExecutor(
            max_workers=self.workers,
            initializer=initializer,
            initargs=(self.template, self.template_path, self.content_dir,
                      self.output_dir, self.output_extension)
        ) as executor:
            futures = {executor.submit(process_file, path): path for path in content_files}
            for future in as_completed(futures):
                file_path = futures[future]
                try:
                    result.rendered.append(future.result())
                except (PlainsiteError, OSError) as e:
                    self._record_failure(result, file_path, e)
        result.rendered.sort()

    def build(self):
        """Main build process."""
        self.logger.debug("Starting site build...")
        self.load_template()
        self.create_output_dir()
        self.copy_assets_to_output()
        return self.build_files(self.get_content_files())
