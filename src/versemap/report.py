import jinja2
import yaml


_env = jinja2.Environment(trim_blocks=True, lstrip_blocks=True,
                          keep_trailing_newline=True)

SET_SUMMARY = _env.from_string("""\
Versifications:
{% for v in versifications %}
  {{ v.name }} ({{ v.verse_count }} verses)\
{{ ' aka ' ~ v.aliases|join(', ') if v.aliases }}\
{{ ': ' ~ v.description if v.description }}
{% endfor %}
Mappings:
{% for key, size in mappings %}
  {{ key }} ({{ size }} verses)
{% else %}
  (none)
{% endfor %}
""")

MAPPING_SUMMARY = _env.from_string("""\
{{ mapping.source.name }}>{{ mapping.target.name }}
  mapped source verses: {{ mapped }} of {{ mapping.source.verse_count }}
  unmapped source verses: {{ unmapped }}
  one-to-many entries: {{ one_to_many }}
  target verses not reached: {{ unreached }} of {{ mapping.target.verse_count }}
""")


def mapping_keys(vset):
    """Yields the FROM/TO/N key of every stored mapping, with its size."""
    counters = {}
    for mapping in vset.mappings:
        pair = (mapping.source.name, mapping.target.name)
        counters[pair] = counters.get(pair, 0) + 1
        yield '%s/%s/%d' % (pair + (counters[pair],)), len(mapping)


def render_set_summary(vset):
    return SET_SUMMARY.render(versifications=vset.versifications,
                              mappings=list(mapping_keys(vset)))


def render_mapping_summary(mapping):
    reached = set()
    one_to_many = 0
    for (_, targets) in mapping.items():
        reached.update(targets)
        if len(targets) > 1:
            one_to_many += 1
    return MAPPING_SUMMARY.render(
        mapping=mapping,
        mapped=len(mapping),
        unmapped=mapping.source.verse_count - len(mapping),
        one_to_many=one_to_many,
        unreached=mapping.target.verse_count - len(reached),
    )


def export_mapping_yaml(mapping, stream):
    yaml.dump(mapping.to_dict(), stream, sort_keys=False, allow_unicode=True,
              default_flow_style=False)
