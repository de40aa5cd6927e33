"""Inspect versification set files and resolve mappings between the
versifications they contain.
"""

import argparse
import logging
import sys

from .config import (Config, load_config, load_versification_set,
                     parse_auto_mode, setup_logging)
from .errors import VersificationError
from .reference import parse_reference
from .report import (export_mapping_yaml, render_mapping_summary,
                     render_set_summary)


logger = logging.getLogger(__name__)


def cmd_list(vset, options, out):
    out.write(render_set_summary(vset))


def cmd_resolve(vset, options, out):
    mapping = vset.find_mapping_by_key(options.key, options.auto_mode)
    if options.yaml == '-':
        export_mapping_yaml(mapping, out)
    elif options.yaml:
        with open(options.yaml, 'w', encoding='utf-8') as f:
            export_mapping_yaml(mapping, f)
        logger.info("Wrote %s to %s", options.key, options.yaml)
    elif options.summary:
        out.write(render_mapping_summary(mapping))
    else:
        for line in mapping.rule_lines():
            out.write(line + '\n')


def cmd_lookup(vset, options, out):
    mapping = vset.find_mapping_by_key(options.key, options.auto_mode)
    reference = parse_reference(options.reference)
    targets = mapping.lookup(reference)
    if not targets:
        out.write('%s: not mapped\n' % (reference,))
    else:
        out.write('%s: %s\n' % (reference, ', '.join(str(t) for t in targets)))


def cmd_check(vset, options, out):
    vset.dumps()
    out.write('OK: %d versifications, %d mappings\n' %
              (len(vset.versifications), len(vset.mappings)))


commands = {
    'list': cmd_list,
    'resolve': cmd_resolve,
    'lookup': cmd_lookup,
    'check': cmd_check,
}


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument('--config', '-c', help="YAML configuration file.")
    parser.add_argument('--set', '-s', dest='set_file',
                        help="Versification set file.")
    parser.add_argument('--auto-mode', choices=['global', 'pair'],
                        help="When to use a single stored mapping instead of "
                        "merging candidates.")
    parser.add_argument('--verbose', '-v', action='store_true')
    subparsers = parser.add_subparsers(dest='command', required=True)

    subparsers.add_parser('list', help="Summarize the set.")

    resolve = subparsers.add_parser('resolve', help="Resolve a mapping.")
    resolve.add_argument('key', help="FROM/TO or FROM/TO/NUMBER.")
    resolve.add_argument('--summary', action='store_true')
    resolve.add_argument('--yaml', metavar='FILE',
                         help="Export as YAML ('-' for standard output).")

    lookup = subparsers.add_parser('lookup', help="Map a single reference.")
    lookup.add_argument('key', help="FROM/TO or FROM/TO/NUMBER.")
    lookup.add_argument('reference', help='e.g. "Gen 32:1".')

    subparsers.add_parser('check', help="Validate the set.")
    return parser.parse_args(argv)


def make_config(options):
    config = load_config(options.config) if options.config else Config()
    if options.set_file:
        config.versification_set = options.set_file
    if options.auto_mode:
        config.auto_mode = parse_auto_mode(options.auto_mode)
    if options.verbose:
        config.log_level = 'DEBUG'
    return config


def main(argv=None, out=None):
    options = parse_args(argv)
    if out is None:
        out = sys.stdout

    try:
        config = make_config(options)
        setup_logging(config.log_level)
        options.auto_mode = config.auto_mode
        vset = load_versification_set(config)
        commands[options.command](vset, options, out)
    except (VersificationError, OSError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
