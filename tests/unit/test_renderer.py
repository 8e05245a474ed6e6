"""
Unit tests for result rendering and the placement surface.
"""

import jinja2
import pytest

from targetpharma.models.pharmacology_models import PharmacologyRecord
from targetpharma.rendering.renderer import PlacementSurface, ResultRenderer
from targetpharma.rendering.templates import (
    DEFAULT_BODY_TEMPLATE,
    DEFAULT_TABLE_TEMPLATE,
    TABLE_BODY_ID,
)


@pytest.mark.unit
class TestResultRenderer:
    """Test template rendering."""

    def test_table_template_has_header_and_body(self, records):
        markup = ResultRenderer().render(records, DEFAULT_TABLE_TEMPLATE)
        assert markup.startswith('<table')
        assert '<thead>' in markup
        assert f'<tbody id="{TABLE_BODY_ID}">' in markup
        assert markup.count('<tr class="record-deco">') == 2

    def test_body_template_is_body_only(self, records):
        markup = ResultRenderer().render(records, DEFAULT_BODY_TEMPLATE)
        assert markup.startswith(f'<tbody id="{TABLE_BODY_ID}">')
        assert markup.endswith('</tbody>')
        assert '<thead>' not in markup

    def test_records_keep_their_order(self, records):
        markup = ResultRenderer().render(list(reversed(records)), DEFAULT_BODY_TEMPLATE)
        assert markup.index('Nilotinib') < markup.index('Imatinib')

    def test_fields_rendered(self, records):
        markup = ResultRenderer().render(records[:1], DEFAULT_BODY_TEMPLATE)
        for text in ('Imatinib', 'Homo sapiens', 'IC50', '25.0', 'nM', '7.6'):
            assert text in markup

    def test_missing_values_render_empty(self):
        markup = ResultRenderer().render([PharmacologyRecord()], DEFAULT_BODY_TEMPLATE)
        assert 'None' not in markup

    def test_values_are_escaped(self):
        record = PharmacologyRecord(compound_pref_label='<script>alert(1)</script>')
        markup = ResultRenderer().render([record], DEFAULT_BODY_TEMPLATE)
        assert '<script>' not in markup
        assert '&lt;script&gt;' in markup

    def test_custom_template_sees_camel_case_keys(self, records):
        template = '{% for r in pharmacology %}{{ r.compoundPrefLabel }}:{{ r.activityStandardUnits }};{% endfor %}'
        assert ResultRenderer().render(records, template) == 'Imatinib:nM;Nilotinib:nM;'

    def test_empty_records(self):
        assert ResultRenderer().render([], DEFAULT_BODY_TEMPLATE) == f'<tbody id="{TABLE_BODY_ID}"></tbody>'

    def test_compiled_templates_are_cached(self):
        renderer = ResultRenderer()
        assert renderer.compile('{{ 1 }}') is renderer.compile('{{ 1 }}')

    def test_syntax_error_raises_template_error(self):
        with pytest.raises(jinja2.TemplateError):
            ResultRenderer().render([], '{% for %}')


@pytest.mark.unit
class TestPlacementSurface:
    """Test placement content replacement."""

    def test_replace_overwrites(self):
        surface = PlacementSurface({'div': 'old'})
        surface.replace_content('div', 'new')
        assert surface.content('div') == 'new'

    def test_unknown_placement(self):
        surface = PlacementSurface()
        assert surface.content('missing') is None
        assert 'missing' not in surface

    def test_initial_content_is_copied(self):
        initial = {'div': 'old'}
        surface = PlacementSurface(initial)
        surface.replace_content('div', 'new')
        assert initial == {'div': 'old'}
        assert surface.to_dict() == {'div': 'new'}
