import logging
import os

import yaml

from .errors import FormatError
from .versification_set import AutoMode, VersificationSet


# Prefer the libyaml-backed loader when PyYAML was built with it.
_Loader = getattr(yaml, 'CSafeLoader', yaml.SafeLoader)

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


class Config:
    def __init__(self, versification_set=None, auto_mode=AutoMode.GLOBAL,
                 log_level='WARNING'):
        self.versification_set = versification_set
        self.auto_mode = auto_mode
        self.log_level = log_level

    def __repr__(self):
        return 'Config(%r, %r, %r)' % (self.versification_set,
                                       self.auto_mode, self.log_level)


_keys = {'versification_set', 'auto_mode', 'log_level'}


def parse_auto_mode(value):
    try:
        return AutoMode(value)
    except ValueError:
        raise FormatError("Invalid auto_mode: %r" % (value,))


def parse_log_level(value):
    level = str(value).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise FormatError("Invalid log_level: %r" % (value,))
    return level


def load_config(path):
    """Reads a YAML configuration file.  A relative versification_set path is
    taken relative to the directory of the configuration file.
    """
    with open(path, encoding='utf-8') as f:
        raw = yaml.load(f, Loader=_Loader)
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise FormatError("Configuration must be a mapping: %s" % (path,))
    unknown = set(raw) - _keys
    if unknown:
        raise FormatError("Unknown configuration keys: %s" %
                          (', '.join(sorted(str(k) for k in unknown)),))

    config = Config()
    if raw.get('versification_set') is not None:
        config.versification_set = os.path.join(os.path.dirname(path),
                                                raw['versification_set'])
    if 'auto_mode' in raw:
        config.auto_mode = parse_auto_mode(raw['auto_mode'])
    if 'log_level' in raw:
        config.log_level = parse_log_level(raw['log_level'])
    return config


def setup_logging(level):
    logging.basicConfig(level=level, format=LOG_FORMAT)


def load_versification_set(config):
    if config.versification_set is None:
        raise FormatError("No versification set file configured")
    return VersificationSet(config.versification_set)
