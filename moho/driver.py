import logging
import os

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from moho.error import MohoParseError
from moho.parser import parse_file
from moho.views import class_view, field_view, method_view, properties_view


logger = logging.getLogger(__name__)


@dataclass
class MohoConfig:
    run_path: str = '.'
    moho_path: str = os.path.join(os.path.expanduser('~'), '.moho')
    extension: str = '.moho'
    default_template: str = 'empty.rhai'
    template_suffix: str = '.rhai'
    max_workers: Optional[int] = None


class TemplateRunner(ABC):
    """Executes one template against the scope built for a single class.

    Each source file gets its own scope, so implementations must not keep
    per-class state between calls unless they are thread-safe.
    """

    @abstractmethod
    def run(self, template_path, scope):
        raise NotImplementedError


def ensure_config_dir(config):
    if not os.path.isdir(config.moho_path):
        logger.info('Creating template directory %s', config.moho_path)
        os.makedirs(config.moho_path, exist_ok=True)

    default = os.path.join(config.moho_path, config.default_template)
    if not os.path.exists(default):
        open(default, 'w').close()

    return default


def discover(run_path, extension='.moho'):  # type: (str, str) -> Iterator[str]
    for root, dirs, files in os.walk(run_path):
        dirs.sort()
        for name in sorted(files):
            if name.endswith(extension):
                path = os.path.join(root, name)
                logger.debug('Found source file %s', path)
                yield path


def resolve_template(config, dclass):
    base = dclass.primary_base
    if base is not None:
        template = os.path.join(config.moho_path, base + config.template_suffix)
        if os.path.isfile(template):
            return template
        logger.debug('No template for base %s of %s, using default', base, dclass.name)

    return os.path.join(config.moho_path, config.default_template)


def process_file(path, config, runner):  # type: (str, MohoConfig, TemplateRunner) -> bool
    try:
        translation_unit = parse_file(path)
    except MohoParseError as e:
        logger.warning('Skipping %s: %s at line %s, column %s', path, e.message, e.line, e.column)
        return False
    except (OSError, UnicodeDecodeError) as e:
        logger.warning('Skipping %s: %s', path, e)
        return False

    source_dir = os.path.dirname(os.path.abspath(path))

    # Classes run in declaration order against one scope per file.
    scope = {
        'Filename': os.path.basename(path),
        'Path': source_dir,
    }

    for dclass in translation_unit:
        scope.update({
            'Name': dclass.name,
            'Inherit': tuple(dclass.inherit),
            'Properties': properties_view(dclass.properties),
            'Class': class_view(dclass),
            'Fields': tuple(field_view(field) for field in dclass.fields()),
            'Methods': tuple(method_view(method) for method in dclass.methods()),
        })

        runner.run(resolve_template(config, dclass), scope)

    return True


def run(config, runner):  # type: (MohoConfig, TemplateRunner) -> Dict[str, bool]
    ensure_config_dir(config)

    paths = list(discover(config.run_path, config.extension))
    if not paths:
        logger.info('No %s files under %s', config.extension, config.run_path)
        return {}

    with ThreadPoolExecutor(max_workers=config.max_workers or len(paths), thread_name_prefix='moho') as executor:
        futures = {path: executor.submit(process_file, path, config, runner) for path in paths}

    results = {}
    for path, future in futures.items():
        try:
            results[path] = future.result()
        except Exception:
            logger.exception('Template run failed for %s', path)
            results[path] = False

    return results
