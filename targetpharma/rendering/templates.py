"""
Default result templates.

The initial render replaces the widget's placement with a full table;
later page fetches only replace the table body, so two defaults exist.
Records are exposed to templates as ``pharmacology`` with camelCase keys.
"""

TABLE_BODY_ID = "pharmacology-table-body"

_ROWS = (
    '{% for record in pharmacology %}<tr class="record-deco">'
    '<td class="cell-basictext">{{ record.compoundPrefLabel or "" }}</td>'
    '<td class="cell-basictext">{% for target in record.targetOrganisms %} {{ target.organism or "" }} {% endfor %}</td>'
    '<td class="cell-basictext">{{ record.assayOrganism or "" }}</td>'
    '<td class="cell-longtext">{{ record.assayDescription or "" }}</td>'
    '<td class="lead cell-basictext">{{ record.activityActivityType or "" }}</td>'
    '<td class="lead cell-basictext">{{ record.activityRelation or "" }}</td>'
    '<td class="lead cell-basictext">{{ record.activityStandardValue if record.activityStandardValue is not none else "" }}</td>'
    '<td class="lead cell-basictext">{{ record.activityStandardUnits or "" }}</td>'
    '<td class="cell-basictext" >{{ record.compoundFullMwt if record.compoundFullMwt is not none else "" }}</td>'
    '<td class="cell-longtext" style="word-wrap:break-word;">{{ record.compoundSmiles or "" }}</td>'
    '<td class="cell-longtext" style="word-wrap:break-word;">{{ record.compoundInchi or "" }}</td>'
    '<td class="cell-longtext" style="word-wrap:break-word;">{{ record.compoundInchikey or "" }}</td>'
    '<td class="cell-basictext" >{{ record.pChembl if record.pChembl is not none else "" }}</td></tr>'
    '{% endfor %}'
)

DEFAULT_BODY_TEMPLATE = f'<tbody id="{TABLE_BODY_ID}">{_ROWS}</tbody>'

DEFAULT_TABLE_TEMPLATE = (
    '<table id="target-pharma-table"><thead><tr><th class="lead">Compound</th><th class="lead">Target</th>'
    '<th></th><th class="lead" style="text-align:left;">Assay</th><th></th><th></th>'
    '<th class="lead">Activity</th><th></th><th></th><th></th><th></th><th></th></tr>'
    '<tr><th align="center">Name</th>'
    '<th>Organism</th>'
    '<th>Organism</th>'
    '<th>Description</th>'
    '<th>Type</th>'
    '<th>Relation</th>'
    '<th>Value</th>'
    '<th>Units</th>'
    '<th>Mol Weight</th>'
    '<th>SMILES</th>'
    '<th>InChi</th>'
    '<th>InChiKey</th>'
    '<th>pChembl</th></tr></thead>'
    f'{DEFAULT_BODY_TEMPLATE}</table>'
)
